"""
Database Models and Connection Handling
SQLite database schema and connection management for TantalusBot
"""

import json
import sqlite3
import aiosqlite
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from datetime import datetime
from typing import Optional, Dict, Any, List
from config import DATABASE_CONFIG, TIERS

logger = logging.getLogger('TantalusBot.Database')

class Database:
    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or DATABASE_CONFIG['database_path']
        self.backup_path = DATABASE_CONFIG['backup_path']
        self.timeout = DATABASE_CONFIG['busy_timeout_seconds']

        # Ensure database directory exists
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

    async def initialize(self):
        """Initialize the database and create tables if they don't exist"""
        logger.info('Initializing database...')

        async with self.connect() as db:
            await self._create_tables(db)

        await self._migrate_add_columns()
        logger.info('Database initialization complete')

    async def _create_tables(self, db: aiosqlite.Connection):
        """Create all necessary tables"""

        # Fighters table (user_id is the Discord user ID)
        await db.execute('''
            CREATE TABLE IF NOT EXISTS fighters (
                user_id INTEGER PRIMARY KEY,
                name TEXT NOT NULL,
                weight_class TEXT,
                points INTEGER NOT NULL DEFAULT 0,
                tier TEXT NOT NULL DEFAULT 'Amateur',
                wins INTEGER DEFAULT 0,
                losses INTEGER DEFAULT 0,
                draws INTEGER DEFAULT 0,
                knockouts INTEGER DEFAULT 0,
                banned_until TEXT,
                banned_reason TEXT,
                is_active BOOLEAN DEFAULT TRUE,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        # Admins table
        await db.execute('''
            CREATE TABLE IF NOT EXISTS admins (
                user_id INTEGER PRIMARY KEY,
                added_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        # Fight records are append-only
        await db.execute('''
            CREATE TABLE IF NOT EXISTS fight_records (
                record_id INTEGER PRIMARY KEY AUTOINCREMENT,
                fighter_id INTEGER NOT NULL,
                opponent_name TEXT NOT NULL,
                result TEXT NOT NULL CHECK(result IN ('Win', 'Loss', 'Draw')),
                method TEXT NOT NULL,
                round INTEGER DEFAULT 1,
                date TEXT NOT NULL,
                weight_class TEXT,
                points_earned INTEGER NOT NULL,
                notes TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (fighter_id) REFERENCES fighters (user_id)
            )
        ''')

        # Tier history table
        await db.execute('''
            CREATE TABLE IF NOT EXISTS tier_history (
                history_id INTEGER PRIMARY KEY AUTOINCREMENT,
                fighter_id INTEGER NOT NULL,
                from_tier TEXT NOT NULL,
                to_tier TEXT NOT NULL,
                reason TEXT,
                points_before INTEGER,
                points_after INTEGER,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (fighter_id) REFERENCES fighters (user_id)
            )
        ''')

        # Scheduled fights (fight references for disputes)
        await db.execute('''
            CREATE TABLE IF NOT EXISTS scheduled_fights (
                fight_id INTEGER PRIMARY KEY AUTOINCREMENT,
                fighter1_id INTEGER,
                fighter2_id INTEGER,
                weight_class TEXT,
                scheduled_date TEXT,
                status TEXT DEFAULT 'Scheduled' CHECK(status IN ('Pending', 'Scheduled', 'Completed', 'Cancelled', 'Disputed')),
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (fighter1_id) REFERENCES fighters (user_id),
                FOREIGN KEY (fighter2_id) REFERENCES fighters (user_id)
            )
        ''')

        # Disputes table
        await db.execute('''
            CREATE TABLE IF NOT EXISTS disputes (
                dispute_id INTEGER PRIMARY KEY AUTOINCREMENT,
                disputer_id INTEGER NOT NULL,
                opponent_id INTEGER,
                opponent_name TEXT,
                fight_id INTEGER,
                fight_link TEXT,
                category TEXT NOT NULL,
                reason TEXT NOT NULL,
                evidence_urls TEXT DEFAULT '[]',
                status TEXT NOT NULL DEFAULT 'Open' CHECK(status IN ('Open', 'In Review', 'Resolved')),
                resolution_type TEXT,
                resolution TEXT,
                admin_notes TEXT,
                admin_message_to_disputer TEXT,
                admin_message_to_opponent TEXT,
                resolved_by INTEGER,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                resolved_at TIMESTAMP,
                FOREIGN KEY (disputer_id) REFERENCES fighters (user_id),
                FOREIGN KEY (opponent_id) REFERENCES fighters (user_id),
                FOREIGN KEY (fight_id) REFERENCES scheduled_fights (fight_id)
            )
        ''')

        # Dispute message thread
        await db.execute('''
            CREATE TABLE IF NOT EXISTS dispute_messages (
                message_id INTEGER PRIMARY KEY AUTOINCREMENT,
                dispute_id INTEGER NOT NULL,
                sender_id INTEGER NOT NULL,
                sender_role TEXT NOT NULL CHECK(sender_role IN ('fighter', 'admin')),
                message TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (dispute_id) REFERENCES disputes (dispute_id)
            )
        ''')

        # In-app notifications
        await db.execute('''
            CREATE TABLE IF NOT EXISTS notifications (
                notification_id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                type TEXT NOT NULL,
                title TEXT NOT NULL,
                message TEXT NOT NULL,
                is_read BOOLEAN DEFAULT FALSE,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        # League logs table (for tracking engine actions)
        await db.execute('''
            CREATE TABLE IF NOT EXISTS league_logs (
                log_id INTEGER PRIMARY KEY AUTOINCREMENT,
                action_type TEXT NOT NULL,
                user_id INTEGER,
                details TEXT,
                timestamp TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        # Create indexes for better performance
        await db.execute('CREATE INDEX IF NOT EXISTS idx_fighters_tier ON fighters (tier)')
        await db.execute('CREATE INDEX IF NOT EXISTS idx_fighters_name ON fighters (name)')
        await db.execute('CREATE INDEX IF NOT EXISTS idx_fight_records_fighter_date ON fight_records (fighter_id, date DESC)')
        await db.execute('CREATE INDEX IF NOT EXISTS idx_tier_history_created ON tier_history (created_at DESC)')
        await db.execute('CREATE INDEX IF NOT EXISTS idx_disputes_status ON disputes (status)')
        await db.execute('CREATE INDEX IF NOT EXISTS idx_dispute_messages_dispute ON dispute_messages (dispute_id)')
        await db.execute('CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications (user_id, is_read)')

    async def _migrate_add_columns(self):
        """Add admin message columns to dispute tables created before direct admin messaging"""
        async with self.connect() as db:
            cursor = await db.execute("PRAGMA table_info(disputes)")
            columns = [column[1] for column in await cursor.fetchall()]

            for column in ('admin_message_to_disputer', 'admin_message_to_opponent'):
                if column not in columns:
                    await db.execute(f'ALTER TABLE disputes ADD COLUMN {column} TEXT')
                    logger.info(f'Added {column} column to disputes')

    @asynccontextmanager
    async def connect(self):
        """Open an autocommit connection with dict-friendly rows"""
        db = await aiosqlite.connect(self.db_path, timeout=self.timeout, isolation_level=None)
        db.row_factory = aiosqlite.Row
        try:
            yield db
        finally:
            await db.close()

    @asynccontextmanager
    async def transaction(self):
        """
        Run a block of statements as one write transaction

        BEGIN IMMEDIATE takes the database write lock up front, so concurrent
        writers queue on the busy timeout instead of interleaving. Any
        exception rolls the whole block back and is re-raised.
        """
        async with self.connect() as db:
            await db.execute('BEGIN IMMEDIATE')
            try:
                yield db
            except BaseException:
                await db.rollback()
                raise
            else:
                await db.commit()

    @asynccontextmanager
    async def _use(self, conn: Optional[aiosqlite.Connection] = None):
        """Reuse the caller's transaction, or run in a new one"""
        if conn is not None:
            yield conn
        else:
            async with self.transaction() as db:
                yield db

    async def backup_database(self) -> str:
        """Create a backup of the database"""
        Path(self.backup_path).mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        backup_filename = f"backup_{timestamp}.db"
        backup_path = Path(self.backup_path) / backup_filename

        async with aiosqlite.connect(self.db_path) as source:
            async with aiosqlite.connect(str(backup_path)) as backup:
                await source.backup(backup)

        logger.info(f'Database backup created: {backup_filename}')
        return str(backup_path)

    async def log_action(self, action_type: str, user_id: Optional[int] = None,
                         details: Optional[str] = None, conn: Optional[aiosqlite.Connection] = None):
        """Log an engine action to the database"""
        async with self._use(conn) as db:
            await db.execute(
                'INSERT INTO league_logs (action_type, user_id, details) VALUES (?, ?, ?)',
                (action_type, user_id, details)
            )

    # Fighter management methods
    async def create_fighter(self, user_id: int, name: str, weight_class: Optional[str] = None,
                             points: int = 0, tier: Optional[str] = None) -> bool:
        """Create a new fighter in the database"""
        try:
            async with self.transaction() as db:
                await db.execute(
                    '''INSERT INTO fighters (user_id, name, weight_class, points, tier)
                       VALUES (?, ?, ?, ?, ?)''',
                    (user_id, name, weight_class, points, tier or TIERS[0]['name'])
                )
                await self.log_action('fighter_created', user_id, f'Name: {name}', conn=db)
            return True
        except sqlite3.IntegrityError:
            return False  # Fighter already exists

    async def get_fighter(self, user_id: int, conn: Optional[aiosqlite.Connection] = None) -> Optional[Dict[str, Any]]:
        """Get fighter data from database"""
        async with self._read(conn) as db:
            cursor = await db.execute('SELECT * FROM fighters WHERE user_id = ?', (user_id,))
            row = await cursor.fetchone()
            return dict(row) if row else None

    async def get_fighters_by_name(self, name: str, conn: Optional[aiosqlite.Connection] = None) -> List[Dict[str, Any]]:
        """Get fighters whose display name matches exactly"""
        async with self._read(conn) as db:
            cursor = await db.execute('SELECT * FROM fighters WHERE name = ?', (name,))
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def get_active_fighters(self) -> List[Dict[str, Any]]:
        """Get all active fighters"""
        async with self.connect() as db:
            cursor = await db.execute(
                'SELECT * FROM fighters WHERE is_active = TRUE ORDER BY user_id'
            )
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def update_fighter(self, user_id: int, conn: Optional[aiosqlite.Connection] = None, **kwargs) -> bool:
        """Update fighter data"""
        if not kwargs:
            return False

        fields = ', '.join(f'{key} = ?' for key in kwargs.keys())
        values = list(kwargs.values()) + [user_id]

        async with self._use(conn) as db:
            cursor = await db.execute(
                f'UPDATE fighters SET {fields} WHERE user_id = ?',
                values
            )
            return cursor.rowcount > 0

    async def increment_points(self, user_id: int, delta: int, floor: Optional[int] = None,
                               conn: Optional[aiosqlite.Connection] = None) -> Optional[int]:
        """
        Add a delta to a fighter's points in a single statement

        Args:
            user_id: Fighter's Discord ID
            delta: Signed point change
            floor: Optional lower bound for the new total

        Returns:
            New point total, or None if the fighter does not exist
        """
        async with self._use(conn) as db:
            if floor is None:
                cursor = await db.execute(
                    'UPDATE fighters SET points = points + ? WHERE user_id = ?',
                    (delta, user_id)
                )
            else:
                cursor = await db.execute(
                    'UPDATE fighters SET points = MAX(points + ?, ?) WHERE user_id = ?',
                    (delta, floor, user_id)
                )

            if cursor.rowcount == 0:
                return None

            cursor = await db.execute('SELECT points FROM fighters WHERE user_id = ?', (user_id,))
            row = await cursor.fetchone()
            return row[0]

    async def increment_record_counters(self, user_id: int, result: str, is_knockout: bool = False,
                                        conn: Optional[aiosqlite.Connection] = None):
        """Bump the win/loss/draw (and knockout) counters for a fighter"""
        column = {'Win': 'wins', 'Loss': 'losses', 'Draw': 'draws'}[result]
        knockouts = 1 if is_knockout and result == 'Win' else 0

        async with self._use(conn) as db:
            await db.execute(
                f'UPDATE fighters SET {column} = {column} + 1, knockouts = knockouts + ? WHERE user_id = ?',
                (knockouts, user_id)
            )

    # Fight record methods
    async def create_fight_record(self, fighter_id: int, opponent_name: str, result: str, method: str,
                                  fight_round: int, date: str, weight_class: Optional[str],
                                  points_earned: int, notes: Optional[str] = None,
                                  conn: Optional[aiosqlite.Connection] = None) -> int:
        """Append a fight record"""
        async with self._use(conn) as db:
            cursor = await db.execute(
                '''INSERT INTO fight_records
                   (fighter_id, opponent_name, result, method, round, date, weight_class, points_earned, notes)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)''',
                (fighter_id, opponent_name, result, method, fight_round, date, weight_class,
                 points_earned, notes)
            )
            return cursor.lastrowid

    async def get_recent_results(self, fighter_id: int, limit: int,
                                 conn: Optional[aiosqlite.Connection] = None) -> List[str]:
        """Get the most recent fight results, newest first"""
        async with self._read(conn) as db:
            cursor = await db.execute(
                '''SELECT result FROM fight_records
                   WHERE fighter_id = ?
                   ORDER BY date DESC, record_id DESC LIMIT ?''',
                (fighter_id, limit)
            )
            rows = await cursor.fetchall()
            return [row[0] for row in rows]

    async def get_fight_history(self, fighter_id: int, limit: int = 50) -> List[Dict[str, Any]]:
        """Get fight history for a fighter"""
        async with self.connect() as db:
            cursor = await db.execute(
                '''SELECT * FROM fight_records
                   WHERE fighter_id = ?
                   ORDER BY date DESC, record_id DESC LIMIT ?''',
                (fighter_id, limit)
            )
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    # Tier history methods
    async def add_tier_history(self, fighter_id: int, from_tier: str, to_tier: str, reason: str,
                               points_before: int, points_after: int,
                               conn: Optional[aiosqlite.Connection] = None) -> int:
        async with self._use(conn) as db:
            cursor = await db.execute(
                '''INSERT INTO tier_history
                   (fighter_id, from_tier, to_tier, reason, points_before, points_after)
                   VALUES (?, ?, ?, ?, ?, ?)''',
                (fighter_id, from_tier, to_tier, reason, points_before, points_after)
            )
            return cursor.lastrowid

    async def get_tier_history(self, fighter_id: int) -> List[Dict[str, Any]]:
        """Get tier changes for a fighter, newest first"""
        async with self.connect() as db:
            cursor = await db.execute(
                '''SELECT * FROM tier_history WHERE fighter_id = ?
                   ORDER BY created_at DESC, history_id DESC''',
                (fighter_id,)
            )
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    # Scheduled fight methods
    async def create_scheduled_fight(self, fighter1_id: int, fighter2_id: int,
                                     weight_class: Optional[str] = None,
                                     scheduled_date: Optional[str] = None,
                                     status: str = 'Scheduled') -> int:
        async with self.transaction() as db:
            cursor = await db.execute(
                '''INSERT INTO scheduled_fights (fighter1_id, fighter2_id, weight_class, scheduled_date, status)
                   VALUES (?, ?, ?, ?, ?)''',
                (fighter1_id, fighter2_id, weight_class, scheduled_date, status)
            )
            return cursor.lastrowid

    async def get_scheduled_fight(self, fight_id: int,
                                  conn: Optional[aiosqlite.Connection] = None) -> Optional[Dict[str, Any]]:
        async with self._read(conn) as db:
            cursor = await db.execute('SELECT * FROM scheduled_fights WHERE fight_id = ?', (fight_id,))
            row = await cursor.fetchone()
            return dict(row) if row else None

    async def update_scheduled_fight_status(self, fight_id: int, status: str,
                                            conn: Optional[aiosqlite.Connection] = None) -> bool:
        async with self._use(conn) as db:
            cursor = await db.execute(
                'UPDATE scheduled_fights SET status = ? WHERE fight_id = ?',
                (status, fight_id)
            )
            return cursor.rowcount > 0

    # Dispute methods
    async def create_dispute(self, disputer_id: int, category: str, reason: str,
                             opponent_id: Optional[int] = None, opponent_name: Optional[str] = None,
                             fight_id: Optional[int] = None, fight_link: Optional[str] = None,
                             evidence_urls: Optional[List[str]] = None,
                             conn: Optional[aiosqlite.Connection] = None) -> int:
        """Create a new dispute in Open status"""
        async with self._use(conn) as db:
            cursor = await db.execute(
                '''INSERT INTO disputes
                   (disputer_id, opponent_id, opponent_name, fight_id, fight_link, category, reason, evidence_urls)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?)''',
                (disputer_id, opponent_id, opponent_name, fight_id, fight_link, category, reason,
                 json.dumps(evidence_urls or []))
            )
            return cursor.lastrowid

    async def get_dispute(self, dispute_id: int,
                          conn: Optional[aiosqlite.Connection] = None) -> Optional[Dict[str, Any]]:
        """Get dispute by ID"""
        async with self._read(conn) as db:
            cursor = await db.execute('SELECT * FROM disputes WHERE dispute_id = ?', (dispute_id,))
            row = await cursor.fetchone()
            return self._dispute_from_row(row) if row else None

    async def get_disputes(self, fighter_id: Optional[int] = None,
                           status: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get disputes, optionally filtered to a participant and/or status"""
        query = 'SELECT * FROM disputes WHERE 1 = 1'
        params: List[Any] = []

        if fighter_id is not None:
            query += ' AND (disputer_id = ? OR opponent_id = ?)'
            params.extend([fighter_id, fighter_id])
        if status is not None:
            query += ' AND status = ?'
            params.append(status)

        query += ' ORDER BY created_at DESC, dispute_id DESC'

        async with self.connect() as db:
            cursor = await db.execute(query, params)
            rows = await cursor.fetchall()
            return [self._dispute_from_row(row) for row in rows]

    async def advance_dispute_status(self, dispute_id: int, from_status: str, to_status: str,
                                     conn: Optional[aiosqlite.Connection] = None) -> bool:
        """Move a dispute between statuses only if it is still in from_status"""
        async with self._use(conn) as db:
            cursor = await db.execute(
                '''UPDATE disputes SET status = ?, updated_at = CURRENT_TIMESTAMP
                   WHERE dispute_id = ? AND status = ?''',
                (to_status, dispute_id, from_status)
            )
            return cursor.rowcount > 0

    async def set_dispute_opponent(self, dispute_id: int, opponent_id: int,
                                   conn: Optional[aiosqlite.Connection] = None) -> bool:
        """Fill in a dispute's opponent if none is stored yet"""
        async with self._use(conn) as db:
            cursor = await db.execute(
                '''UPDATE disputes SET opponent_id = ?, updated_at = CURRENT_TIMESTAMP
                   WHERE dispute_id = ? AND opponent_id IS NULL''',
                (opponent_id, dispute_id)
            )
            return cursor.rowcount > 0

    async def mark_dispute_resolved(self, dispute_id: int, resolution_type: str, resolution: str,
                                    resolved_by: int, admin_notes: Optional[str] = None,
                                    opponent_id: Optional[int] = None,
                                    message_to_disputer: Optional[str] = None,
                                    message_to_opponent: Optional[str] = None,
                                    conn: Optional[aiosqlite.Connection] = None) -> bool:
        """
        Resolve a dispute unless it is already resolved

        Returns:
            True if this call resolved the dispute, False if another resolution got there first
        """
        async with self._use(conn) as db:
            cursor = await db.execute(
                '''UPDATE disputes
                   SET status = 'Resolved', resolution_type = ?, resolution = ?, admin_notes = ?,
                       resolved_by = ?, opponent_id = COALESCE(?, opponent_id),
                       admin_message_to_disputer = ?, admin_message_to_opponent = ?,
                       resolved_at = CURRENT_TIMESTAMP, updated_at = CURRENT_TIMESTAMP
                   WHERE dispute_id = ? AND status != 'Resolved' ''',
                (resolution_type, resolution, admin_notes, resolved_by, opponent_id,
                 message_to_disputer, message_to_opponent, dispute_id)
            )
            return cursor.rowcount > 0

    async def delete_resolved_disputes(self) -> int:
        """Delete resolved disputes and their message threads"""
        async with self.transaction() as db:
            await db.execute(
                '''DELETE FROM dispute_messages WHERE dispute_id IN
                   (SELECT dispute_id FROM disputes WHERE status = 'Resolved')'''
            )
            cursor = await db.execute("DELETE FROM disputes WHERE status = 'Resolved'")
            return cursor.rowcount

    async def add_dispute_message(self, dispute_id: int, sender_id: int, sender_role: str, message: str,
                                  conn: Optional[aiosqlite.Connection] = None) -> int:
        async with self._use(conn) as db:
            cursor = await db.execute(
                '''INSERT INTO dispute_messages (dispute_id, sender_id, sender_role, message)
                   VALUES (?, ?, ?, ?)''',
                (dispute_id, sender_id, sender_role, message)
            )
            return cursor.lastrowid

    async def get_dispute_messages(self, dispute_id: int) -> List[Dict[str, Any]]:
        """Get a dispute's message thread, oldest first"""
        async with self.connect() as db:
            cursor = await db.execute(
                '''SELECT * FROM dispute_messages WHERE dispute_id = ?
                   ORDER BY created_at ASC, message_id ASC''',
                (dispute_id,)
            )
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    # Notification methods
    async def create_notification(self, user_id: int, notification_type: str, title: str, message: str,
                                  conn: Optional[aiosqlite.Connection] = None) -> int:
        async with self._use(conn) as db:
            cursor = await db.execute(
                'INSERT INTO notifications (user_id, type, title, message) VALUES (?, ?, ?, ?)',
                (user_id, notification_type, title, message)
            )
            return cursor.lastrowid

    async def get_notifications(self, user_id: int, unread_only: bool = False) -> List[Dict[str, Any]]:
        query = 'SELECT * FROM notifications WHERE user_id = ?'
        if unread_only:
            query += ' AND is_read = FALSE'
        query += ' ORDER BY created_at DESC, notification_id DESC'

        async with self.connect() as db:
            cursor = await db.execute(query, (user_id,))
            rows = await cursor.fetchall()
            return [dict(row) for row in rows]

    async def mark_notifications_read(self, user_id: int) -> int:
        async with self.transaction() as db:
            cursor = await db.execute(
                'UPDATE notifications SET is_read = TRUE WHERE user_id = ? AND is_read = FALSE',
                (user_id,)
            )
            return cursor.rowcount

    # Admin methods
    async def add_admin(self, user_id: int) -> bool:
        async with self.transaction() as db:
            cursor = await db.execute('INSERT OR IGNORE INTO admins (user_id) VALUES (?)', (user_id,))
            return cursor.rowcount > 0

    async def is_admin(self, user_id: int) -> bool:
        async with self.connect() as db:
            cursor = await db.execute('SELECT 1 FROM admins WHERE user_id = ?', (user_id,))
            return await cursor.fetchone() is not None

    @asynccontextmanager
    async def _read(self, conn: Optional[aiosqlite.Connection] = None):
        if conn is not None:
            yield conn
        else:
            async with self.connect() as db:
                yield db

    @staticmethod
    def _dispute_from_row(row) -> Dict[str, Any]:
        dispute = dict(row)
        dispute['evidence_urls'] = json.loads(dispute.get('evidence_urls') or '[]')
        return dispute
