"""
Progression System
Applies point changes to fighters and decides tier promotions and demotions
"""

import logging
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any, List
import aiosqlite
from database.models import Database
from database.queries import DatabaseQueries
from config import POINTS_CONFIG, DEMOTION_CONFIG, PROMOTION_REASON, DEMOTION_REASON, STATS_CONFIG
from systems.tier_system import TierTable, TierDefinition
from systems.events import TierChangeEvent
from utils.enums import TierTransition, FightResult
from utils.errors import NotFound

logger = logging.getLogger('TantalusBot.Progression')

@dataclass(frozen=True)
class ProgressionResult:
    fighter_id: int
    old_points: int
    new_points: int
    old_tier: str
    new_tier: str
    transition: TierTransition
    reason: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.transition != TierTransition.NONE

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['transition'] = self.transition.value
        return data


class ProgressionEngine:
    def __init__(self, database: Database, notification_system=None, tier_table: Optional[TierTable] = None):
        self.db = database
        self.queries = DatabaseQueries(database.db_path)
        self.notifications = notification_system
        self.tiers = tier_table or TierTable()
        self.loss_window = DEMOTION_CONFIG['loss_window']
        self.warning_threshold = DEMOTION_CONFIG['warning_threshold']
        self.exempt_tier = DEMOTION_CONFIG['exempt_tier']

    async def apply_outcome(self, fighter_id: int, delta: int,
                            conn: Optional[aiosqlite.Connection] = None,
                            events: Optional[List[object]] = None,
                            check_demotion: bool = True) -> ProgressionResult:
        """
        Apply a point delta to a fighter and settle their tier

        Args:
            fighter_id: Fighter's Discord ID
            delta: Signed point change (0 re-evaluates the tier only)
            conn: Open transaction to join; a new one is used when omitted
            events: List collecting tier events when joining a caller's transaction
            check_demotion: Whether the losing-streak demotion rule applies

        Returns:
            ProgressionResult describing the points and tier before and after

        Raises:
            NotFound: If the fighter does not exist
        """
        if conn is not None:
            return await self._apply(conn, fighter_id, delta, events if events is not None else [], check_demotion)

        pending: List[object] = []
        async with self.db.transaction() as db:
            result = await self._apply(db, fighter_id, delta, pending, check_demotion)

        await self.publish_events(pending)
        return result

    async def _apply(self, db: aiosqlite.Connection, fighter_id: int, delta: int,
                     events: List[object], check_demotion: bool = True) -> ProgressionResult:
        fighter = await self.db.get_fighter(fighter_id, conn=db)
        if not fighter:
            raise NotFound(f'Fighter {fighter_id} not found', {'fighter_id': fighter_id})

        old_points = fighter['points']
        new_points = await self.db.increment_points(fighter_id, delta, floor=POINTS_CONFIG['floor'], conn=db)

        current = self.tiers.get_tier(fighter['tier']) or self.tiers.tier_for(old_points)
        candidate = self.tiers.tier_for(new_points)

        transition = TierTransition.NONE
        new_tier = current
        reason = None

        if candidate.min_points > current.min_points:
            transition = TierTransition.PROMOTION
            new_tier = candidate
            reason = PROMOTION_REASON
        elif check_demotion and await self._should_demote(db, fighter_id, current):
            transition = TierTransition.DEMOTION
            new_tier = self.tiers.previous_tier(current.name)
            reason = DEMOTION_REASON

        if transition != TierTransition.NONE:
            await self.db.update_fighter(fighter_id, conn=db, tier=new_tier.name)
            await self.db.add_tier_history(
                fighter_id, current.name, new_tier.name, reason, old_points, new_points, conn=db
            )
            await self.db.log_action(
                f'tier_{transition.value}', fighter_id,
                f'{current.name} -> {new_tier.name} ({old_points} -> {new_points} pts)', conn=db
            )
            events.append(TierChangeEvent(
                fighter_id=fighter_id,
                fighter_name=fighter['name'],
                from_tier=current.name,
                to_tier=new_tier.name,
                transition=transition.value,
                reason=reason,
                points=new_points,
            ))
            logger.info(f'Fighter {fighter_id} {transition.value}: {current.name} -> {new_tier.name}')

        return ProgressionResult(
            fighter_id=fighter_id,
            old_points=old_points,
            new_points=new_points,
            old_tier=current.name,
            new_tier=new_tier.name,
            transition=transition,
            reason=reason,
        )

    async def _should_demote(self, db: aiosqlite.Connection, fighter_id: int, current: TierDefinition) -> bool:
        """Demote only when the last N fights are all losses and a lower tier exists"""
        if current.name == self.exempt_tier or self.tiers.previous_tier(current.name) is None:
            return False

        results = await self.db.get_recent_results(fighter_id, self.loss_window, conn=db)
        return len(results) == self.loss_window and all(r == FightResult.LOSS.value for r in results)

    async def publish_events(self, events: List[object]):
        if self.notifications and events:
            await self.notifications.publish(events)

    async def get_consecutive_losses(self, fighter_id: int, limit: int = 50) -> int:
        """Count the unbroken run of losses ending at the most recent fight"""
        results = await self.db.get_recent_results(fighter_id, limit)
        streak = 0
        for result in results:
            if result != FightResult.LOSS.value:
                break
            streak += 1
        return streak

    async def get_tier_progression(self, fighter_id: int) -> Dict[str, Any]:
        """
        Get a fighter's standing within their tier

        Returns:
            Dict with current tier, points, distance to the next tier,
            points above the previous tier's floor, progress percentage,
            consecutive losses and demotion warning flag

        Raises:
            NotFound: If the fighter does not exist
        """
        fighter = await self.db.get_fighter(fighter_id)
        if not fighter:
            raise NotFound(f'Fighter {fighter_id} not found', {'fighter_id': fighter_id})

        points = fighter['points']
        current = self.tiers.get_tier(fighter['tier']) or self.tiers.tier_for(points)
        next_tier = self.tiers.next_tier(current.name)
        previous_tier = self.tiers.previous_tier(current.name)

        if next_tier:
            points_to_next = max(0, next_tier.min_points - points)
            band = next_tier.min_points - current.min_points
            progress = round((points - current.min_points) / band * 100)
            progress = max(0, min(100, progress))
        else:
            points_to_next = 0
            progress = 100

        points_from_previous = points - previous_tier.min_points if previous_tier else points
        consecutive_losses = await self.get_consecutive_losses(fighter_id)

        return {
            'fighter_id': fighter_id,
            'current_tier': current.name,
            'points': points,
            'next_tier': next_tier.name if next_tier else None,
            'points_to_next_tier': points_to_next,
            'points_from_previous_tier': points_from_previous,
            'tier_progress_percentage': progress,
            'consecutive_losses': consecutive_losses,
            'demotion_warning': (
                consecutive_losses >= self.warning_threshold and current.name != self.exempt_tier
            ),
        }

    async def get_tier_stats(self) -> Dict[str, Any]:
        """Get league-wide tier statistics (admin accounts excluded)"""
        distribution = await self.queries.get_tier_distribution()
        recent_changes = await self.queries.get_recent_tier_changes(STATS_CONFIG['recent_change_days'])

        promotions = 0
        demotions = 0
        for change in recent_changes:
            from_rank = self.tiers.rank_of(change['from_tier'])
            to_rank = self.tiers.rank_of(change['to_tier'])
            if to_rank > from_rank:
                promotions += 1
            elif to_rank < from_rank:
                demotions += 1

        return {
            'total_fighters': await self.queries.get_total_fighters(),
            'tier_distribution': {
                tier.name: distribution.get(tier.name, {}).get('count', 0) for tier in self.tiers.all_tiers()
            },
            'average_points_per_tier': {
                tier.name: distribution.get(tier.name, {}).get('average_points', 0) for tier in self.tiers.all_tiers()
            },
            'recent_promotions': promotions,
            'recent_demotions': demotions,
        }

    async def get_tier_history(self, fighter_id: int) -> List[Dict[str, Any]]:
        return await self.db.get_tier_history(fighter_id)

    async def get_fighters_by_tier(self, tier_name: str) -> List[Dict[str, Any]]:
        """Get fighters in a tier by name (case-insensitive)"""
        tier = self.tiers.get_tier(tier_name)
        if not tier:
            raise NotFound(f'Unknown tier: {tier_name}', {'tier': tier_name})
        return await self.queries.get_fighters_by_tier(tier.name)

    async def process_all_tier_changes(self) -> Dict[str, int]:
        """
        Re-evaluate every active fighter's tier without changing points

        Returns:
            Dict with processed, promotions, demotions and errors counts
        """
        summary = {'processed': 0, 'promotions': 0, 'demotions': 0, 'errors': 0}

        for fighter in await self.db.get_active_fighters():
            try:
                result = await self.apply_outcome(fighter['user_id'], 0, check_demotion=False)
            except Exception as e:
                summary['errors'] += 1
                logger.error(f"Error processing tier changes for fighter {fighter['user_id']}: {e}")
                continue

            summary['processed'] += 1
            if result.transition == TierTransition.PROMOTION:
                summary['promotions'] += 1
            elif result.transition == TierTransition.DEMOTION:
                summary['demotions'] += 1

        logger.info(f'Tier sweep complete: {summary}')
        return summary
