"""
League Engine
Single entry point wiring the progression and dispute systems together
"""

import logging
from datetime import datetime
from typing import Optional, Dict, Any, List
from database.models import Database
from systems.dispute_system import DisputeSystem
from systems.notification_reconciler import NotificationReconciler
from systems.notification_system import NotificationSystem
from systems.opponent_resolver import OpponentResolver
from systems.points_system import PointsCalculator
from systems.progression_system import ProgressionEngine
from systems.record_system import RecordSystem
from systems.tier_system import TierTable
from utils.enums import DisputeStatus
from utils.errors import NotFound, ValidationError
from utils.role_utils import RoleManager
from workflows.resolution_workflow import ResolutionExecutor

logger = logging.getLogger('TantalusBot.Engine')

class LeagueEngine:
    def __init__(self, database: Database, bot=None):
        self.db = database
        self.roles = RoleManager(database)
        self.tiers = TierTable()
        self.points = PointsCalculator()
        self.notifications = NotificationSystem(database, bot)
        self.resolver = OpponentResolver(database)
        self.progression = ProgressionEngine(database, self.notifications, self.tiers)
        self.records = RecordSystem(database, self.progression, self.points)
        self.disputes = DisputeSystem(database, self.roles, self.resolver, self.notifications)
        self.resolutions = ResolutionExecutor(
            database, self.records, self.roles, self.resolver, self.notifications
        )

    # Fighters
    async def register_fighter(self, user_id: int, name: str, weight_class: Optional[str] = None) -> Dict[str, Any]:
        """Register a fighter at zero points in the lowest tier"""
        if not name or not name.strip():
            raise ValidationError('Fighter name is required')

        if not await self.db.create_fighter(user_id, name.strip(), weight_class):
            raise ValidationError(f'Fighter {user_id} is already registered', {'user_id': user_id})

        logger.info(f'Registered fighter {user_id} ({name.strip()})')
        return await self.db.get_fighter(user_id)

    async def get_fighter(self, user_id: int) -> Dict[str, Any]:
        fighter = await self.db.get_fighter(user_id)
        if not fighter:
            raise NotFound(f'Fighter {user_id} not found', {'fighter_id': user_id})
        return fighter

    async def is_suspended(self, user_id: int, now: Optional[datetime] = None) -> bool:
        """Check if a fighter's suspension or ban is still in effect"""
        fighter = await self.get_fighter(user_id)
        if not fighter.get('banned_until'):
            return False
        return datetime.fromisoformat(fighter['banned_until']) > (now or datetime.now())

    # Fights and progression
    async def report_fight(self, fighter_id: int, opponent_name: str, result: str,
                           method: Optional[str] = None, fight_round: Optional[int] = None,
                           fight_date=None, weight_class: Optional[str] = None,
                           notes: Optional[str] = None) -> Dict[str, Any]:
        return await self.records.report_fight(
            fighter_id, opponent_name, result, method, fight_round, fight_date, weight_class, notes
        )

    async def get_fight_history(self, fighter_id: int, limit: int = 50) -> List[Dict[str, Any]]:
        return await self.records.get_fight_history(fighter_id, limit)

    async def get_tier_progression(self, fighter_id: int) -> Dict[str, Any]:
        return await self.progression.get_tier_progression(fighter_id)

    async def get_tier_stats(self) -> Dict[str, Any]:
        return await self.progression.get_tier_stats()

    async def get_tier_history(self, fighter_id: int) -> List[Dict[str, Any]]:
        await self.get_fighter(fighter_id)
        return await self.progression.get_tier_history(fighter_id)

    async def get_fighters_by_tier(self, tier_name: str) -> List[Dict[str, Any]]:
        return await self.progression.get_fighters_by_tier(tier_name)

    async def process_all_tier_changes(self) -> Dict[str, int]:
        return await self.progression.process_all_tier_changes()

    # Disputes
    async def open_dispute(self, disputer_id: int, category: str, reason: str,
                           opponent_id: Optional[int] = None, opponent_name: Optional[str] = None,
                           evidence_urls: Optional[List[str]] = None, fight_id: Optional[int] = None,
                           fight_link: Optional[str] = None) -> Dict[str, Any]:
        return await self.disputes.open_dispute(
            disputer_id, category, reason, opponent_id=opponent_id, opponent_name=opponent_name,
            evidence_urls=evidence_urls, fight_id=fight_id, fight_link=fight_link
        )

    async def view_dispute(self, dispute_id: int, as_admin: bool = False,
                           viewer_id: Optional[int] = None) -> Dict[str, Any]:
        return await self.disputes.view_dispute(dispute_id, viewer_id=viewer_id, as_admin=as_admin)

    async def mark_in_review(self, dispute_id: int, admin_id: int) -> Dict[str, Any]:
        return await self.disputes.mark_in_review(dispute_id, admin_id)

    async def post_message(self, dispute_id: int, sender_id: int, sender_role: str, body: str) -> Dict[str, Any]:
        return await self.disputes.post_message(dispute_id, sender_id, sender_role, body)

    async def get_messages(self, dispute_id: int) -> List[Dict[str, Any]]:
        return await self.disputes.get_messages(dispute_id)

    async def list_disputes(self, fighter_id: Optional[int] = None,
                            status: Optional[str] = None) -> List[Dict[str, Any]]:
        return await self.disputes.list_disputes(fighter_id=fighter_id, status=status)

    async def resolve_dispute(self, dispute_id: int, admin_id: int, resolution_type: str,
                              resolution_text: str, admin_notes: Optional[str] = None,
                              message_to_disputer: Optional[str] = None,
                              message_to_opponent: Optional[str] = None,
                              opponent_id: Optional[int] = None) -> Dict[str, Any]:
        return await self.resolutions.resolve(
            dispute_id, admin_id, resolution_type, resolution_text,
            admin_notes=admin_notes,
            message_to_disputer=message_to_disputer,
            message_to_opponent=message_to_opponent,
            opponent_id=opponent_id
        )

    async def purge_resolved_disputes(self, admin_id: int) -> int:
        return await self.disputes.purge_resolved(admin_id)

    # Change feed views
    def dispute_reconciler(self, fighter_id: Optional[int] = None) -> NotificationReconciler:
        """Local dispute list that drops resolved rows on a bulk delete"""
        async def load():
            return await self.list_disputes(fighter_id=fighter_id)

        return NotificationReconciler(
            load, key_field='dispute_id',
            bulk_delete_predicate=lambda row: row.get('status') == DisputeStatus.RESOLVED.value
        )

    def notification_reconciler(self, user_id: int) -> NotificationReconciler:
        """Local notification list with an unread count"""
        async def load():
            return await self.notifications.get_notifications(user_id)

        return NotificationReconciler(load, key_field='notification_id')
