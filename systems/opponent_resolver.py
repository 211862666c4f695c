"""
Opponent Resolver
Determines the second party of a dispute when it was not named explicitly
"""

import logging
from typing import Optional, Dict, Any, List
import aiosqlite
from database.models import Database

logger = logging.getLogger('TantalusBot.OpponentResolver')


class OpponentStrategy:
    """One way of finding a dispute's opponent"""

    name = 'base'

    def __init__(self, database: Database):
        self.db = database

    async def resolve(self, dispute: Dict[str, Any],
                      conn: Optional[aiosqlite.Connection] = None) -> Optional[int]:
        raise NotImplementedError


class ExplicitOpponentStrategy(OpponentStrategy):
    name = 'explicit'

    async def resolve(self, dispute, conn=None):
        return dispute.get('opponent_id')


class ScheduledFightStrategy(OpponentStrategy):
    """The fighter on the linked scheduled fight who is not the disputer"""

    name = 'scheduled_fight'

    async def resolve(self, dispute, conn=None):
        fight_id = dispute.get('fight_id')
        if not fight_id:
            return None

        fight = await self.db.get_scheduled_fight(fight_id, conn=conn)
        if not fight:
            return None

        disputer_id = dispute.get('disputer_id')
        if fight['fighter1_id'] == disputer_id:
            return fight['fighter2_id']
        if fight['fighter2_id'] == disputer_id:
            return fight['fighter1_id']

        logger.warning(f"Disputer {disputer_id} is not on scheduled fight {fight_id}")
        return None


class NameMatchStrategy(OpponentStrategy):
    """Exact display-name match; ambiguous names do not resolve"""

    name = 'name_match'

    async def resolve(self, dispute, conn=None):
        opponent_name = (dispute.get('opponent_name') or '').strip()
        if not opponent_name:
            return None

        matches = [
            fighter for fighter in await self.db.get_fighters_by_name(opponent_name, conn=conn)
            if fighter['user_id'] != dispute.get('disputer_id')
        ]

        if len(matches) == 1:
            return matches[0]['user_id']

        if len(matches) > 1:
            logger.warning(f'Opponent name "{opponent_name}" matches {len(matches)} fighters')
        return None


class OpponentResolver:
    def __init__(self, database: Database, strategies: Optional[List[OpponentStrategy]] = None):
        self.db = database
        self.strategies = strategies or [
            ExplicitOpponentStrategy(database),
            ScheduledFightStrategy(database),
            NameMatchStrategy(database),
        ]

    async def resolve(self, dispute: Dict[str, Any],
                      conn: Optional[aiosqlite.Connection] = None) -> Optional[int]:
        """
        Resolve a dispute's opponent by trying each strategy in order

        Args:
            dispute: Dispute dict (disputer_id, opponent_id, fight_id, opponent_name)
            conn: Open transaction to read through

        Returns:
            Opponent's Discord ID, or None if no strategy could resolve one
        """
        for strategy in self.strategies:
            opponent_id = await strategy.resolve(dispute, conn=conn)
            if opponent_id:
                logger.info(f"Resolved opponent {opponent_id} for dispute {dispute.get('dispute_id')} via {strategy.name}")
                return opponent_id

        return None
