"""
Database Query Utilities
Aggregate and reporting queries for TantalusBot
"""

import aiosqlite
from typing import Dict, Any, List
from config import ADMIN_USER_IDS

class DatabaseQueries:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _non_admin_clause(self, column: str = 'user_id'):
        """SQL fragment and params excluding admin accounts"""
        clause = f'{column} NOT IN (SELECT user_id FROM admins)'
        params: List[Any] = []
        if ADMIN_USER_IDS:
            placeholders = ', '.join('?' for _ in ADMIN_USER_IDS)
            clause += f' AND {column} NOT IN ({placeholders})'
            params.extend(sorted(ADMIN_USER_IDS))
        return clause, params

    async def get_total_fighters(self) -> int:
        """Count non-admin fighters"""
        clause, params = self._non_admin_clause()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(f'SELECT COUNT(*) FROM fighters WHERE {clause}', params)
            row = await cursor.fetchone()
            return row[0]

    async def get_tier_distribution(self) -> Dict[str, Dict[str, Any]]:
        """
        Get fighter count and average points for each tier

        Returns:
            Dict mapping tier name to {'count': int, 'average_points': float}
        """
        clause, params = self._non_admin_clause()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                f'''SELECT tier, COUNT(*), AVG(points) FROM fighters
                    WHERE {clause}
                    GROUP BY tier''',
                params
            )
            rows = await cursor.fetchall()

        return {
            tier: {'count': count, 'average_points': round(average or 0, 1)}
            for tier, count, average in rows
        }

    async def get_recent_tier_changes(self, days: int) -> List[Dict[str, Any]]:
        """Get non-admin tier history rows from the last N days"""
        clause, params = self._non_admin_clause('fighter_id')
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f'''SELECT * FROM tier_history
                    WHERE created_at >= datetime('now', ?) AND {clause}
                    ORDER BY created_at DESC, history_id DESC''',
                [f'-{days} days'] + params
            )
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def get_fighters_by_tier(self, tier: str) -> List[Dict[str, Any]]:
        """Get all active fighters in a tier, highest points first"""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                '''SELECT * FROM fighters WHERE tier = ? AND is_active = TRUE
                   ORDER BY points DESC, name ASC''',
                (tier,)
            )
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]
