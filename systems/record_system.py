"""
Record System
Fight record creation and fight history for TantalusBot
"""

import logging
from datetime import date
from typing import Optional, Dict, Any, List, Tuple
import aiosqlite
from database.models import Database
from systems.points_system import PointsCalculator
from systems.progression_system import ProgressionEngine, ProgressionResult
from utils.enums import FightResult, FightMethod
from utils.errors import NotFound, ValidationError
from utils.validators import Validators

logger = logging.getLogger('TantalusBot.Records')

class RecordSystem:
    def __init__(self, database: Database, progression: ProgressionEngine,
                 points_calculator: Optional[PointsCalculator] = None):
        self.db = database
        self.progression = progression
        self.points = points_calculator or PointsCalculator()

    async def report_fight(self, fighter_id: int, opponent_name: str, result: str,
                           method: Optional[str] = None, fight_round: Optional[int] = None,
                           fight_date=None, weight_class: Optional[str] = None,
                           notes: Optional[str] = None) -> Dict[str, Any]:
        """
        Record a self-reported fight result and apply its points

        Args:
            fighter_id: Reporting fighter's Discord ID
            opponent_name: Opponent display name
            result: Win, Loss or Draw
            method: Free-text method (normalized, defaults to UD)
            fight_round: Round the fight ended in (defaults to 1)
            fight_date: Fight date (defaults to today)
            weight_class: Defaults to the fighter's weight class

        Returns:
            Dict with the created record and the progression outcome
        """
        fight_date = fight_date or date.today()
        valid, error = Validators.validate_fight_report(opponent_name, result, fight_date, fight_round)
        if not valid:
            raise ValidationError(error)

        events: List[object] = []
        async with self.db.transaction() as db:
            fighter = await self.db.get_fighter(fighter_id, conn=db)
            if not fighter:
                raise NotFound(f'Fighter {fighter_id} not found', {'fighter_id': fighter_id})

            record, progression = await self.create_fight_record(
                db, fighter_id,
                opponent_name=opponent_name.strip(),
                result=Validators.parse_result(result),
                method=Validators.normalize_method(method),
                fight_round=int(fight_round) if fight_round is not None else 1,
                fight_date=Validators.parse_date(fight_date),
                weight_class=weight_class or fighter.get('weight_class'),
                notes=notes,
                events=events,
            )
            await self.db.log_action(
                'fight_reported', fighter_id,
                f"vs {record['opponent_name']}: {record['result']} by {record['method']} ({record['points_earned']:+d})",
                conn=db
            )

        await self.progression.publish_events(events)
        return {'record': record, 'progression': progression.to_dict()}

    async def create_fight_record(self, db: aiosqlite.Connection, fighter_id: int, opponent_name: str,
                                  result: FightResult, method: FightMethod, fight_round: int, fight_date: date,
                                  weight_class: Optional[str], notes: Optional[str],
                                  events: List[object]) -> Tuple[Dict[str, Any], ProgressionResult]:
        """
        Append a fight record and run its points through progression

        Runs inside the caller's transaction; tier events are appended to events.
        """
        points_earned = self.points.calculate(result, method)
        is_knockout = self.points.is_stoppage(method)

        record_id = await self.db.create_fight_record(
            fighter_id, opponent_name, result.value, method.value, fight_round,
            fight_date.isoformat(), weight_class, points_earned, notes, conn=db
        )
        await self.db.increment_record_counters(fighter_id, result.value, is_knockout, conn=db)
        progression = await self.progression.apply_outcome(fighter_id, points_earned, conn=db, events=events)

        record = {
            'record_id': record_id,
            'fighter_id': fighter_id,
            'opponent_name': opponent_name,
            'result': result.value,
            'method': method.value,
            'round': fight_round,
            'date': fight_date.isoformat(),
            'weight_class': weight_class,
            'points_earned': points_earned,
            'notes': notes,
        }
        logger.info(f'Fight record {record_id} created for fighter {fighter_id}: {result.value} ({points_earned:+d})')
        return record, progression

    async def get_fight_history(self, fighter_id: int, limit: int = 50) -> List[Dict[str, Any]]:
        fighter = await self.db.get_fighter(fighter_id)
        if not fighter:
            raise NotFound(f'Fighter {fighter_id} not found', {'fighter_id': fighter_id})
        return await self.db.get_fight_history(fighter_id, limit)
