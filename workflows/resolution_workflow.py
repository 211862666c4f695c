"""
Dispute Resolution Workflow
Applies an admin's resolution decision and all of its side effects atomically
"""

import logging
from datetime import datetime, timedelta, date
from typing import Optional, Dict, Any, List
import aiosqlite
from database.models import Database
from systems.dispute_state_machine import DisputeStateMachine
from systems.events import DisputeResolvedEvent, SuspensionEvent
from systems.opponent_resolver import OpponentResolver
from systems.record_system import RecordSystem
from utils.enums import ResolutionType, FightResult, FightMethod, ScheduledFightStatus
from utils.errors import NotFound, MissingParty, AlreadyResolved, ValidationError
from utils.role_utils import RoleManager
from utils.validators import Validators
from config import (
    RESOLUTION_TYPES, PERMANENT_BAN_UNTIL, AWARDED_WIN_METHOD, AWARDED_FIGHT_ROUND,
    AWARDED_WIN_NOTE, AWARDED_LOSS_NOTE, DEFAULT_WEIGHT_CLASS,
    get_suspension_days, requires_opponent
)

logger = logging.getLogger('TantalusBot.ResolutionWorkflow')

class ResolutionExecutor:
    def __init__(self, database: Database, record_system: RecordSystem, role_manager: RoleManager,
                 opponent_resolver: Optional[OpponentResolver] = None, notification_system=None):
        self.db = database
        self.records = record_system
        self.roles = role_manager
        self.resolver = opponent_resolver or OpponentResolver(database)
        self.notifications = notification_system

    async def resolve(self, dispute_id: int, admin_id: int, resolution_type: str, resolution_text: str,
                      admin_notes: Optional[str] = None, message_to_disputer: Optional[str] = None,
                      message_to_opponent: Optional[str] = None,
                      opponent_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Resolve a dispute and apply the decision's side effects

        Every write (status, fight records, points and tiers, suspension,
        admin messages) happens in one transaction. If anything fails,
        nothing is applied. Notifications go out only after commit.

        Args:
            dispute_id: Dispute to resolve
            admin_id: Resolving admin's Discord ID
            resolution_type: One of RESOLUTION_TYPES
            resolution_text: Decision shown to both fighters
            admin_notes: Internal notes
            message_to_disputer: Optional direct message to the disputer
            message_to_opponent: Optional direct message to the opponent
            opponent_id: Admin-chosen opponent, used instead of resolving one
                from the dispute (for disputes that name nobody resolvable)

        Returns:
            Dict with the resolved dispute and the applied side effects

        Raises:
            ValidationError: Invalid resolution type, empty text, the disputer
                named as their own opponent, or a message for a missing opponent
            Unauthorized: Caller is not an admin
            NotFound: Unknown dispute or fighter
            AlreadyResolved: Dispute was already resolved
            MissingParty: Decision needs an opponent that cannot be resolved
        """
        valid, error = Validators.validate_resolution(resolution_type, resolution_text)
        if not valid:
            raise ValidationError(error)

        await self.roles.require_admin(admin_id, 'resolve disputes')

        rtype = Validators.parse_resolution_type(resolution_type)
        events: List[object] = []
        outcome: Dict[str, Any] = {
            'resolution_type': rtype.value,
            'opponent_id': None,
            'fight_records': [],
            'progression': [],
            'suspension': None,
        }

        async with self.db.transaction() as db:
            dispute = await self.db.get_dispute(dispute_id, conn=db)
            if not dispute:
                raise NotFound(f'Dispute #{dispute_id} not found', {'dispute_id': dispute_id})

            DisputeStateMachine.check_can_resolve(dispute, is_admin=True)

            if opponent_id is not None:
                if opponent_id == dispute['disputer_id']:
                    raise ValidationError(
                        'A fighter cannot be their own opponent',
                        {'dispute_id': dispute_id, 'opponent_id': opponent_id}
                    )
                if not await self.db.get_fighter(opponent_id, conn=db):
                    raise NotFound(f'Opponent {opponent_id} not found', {'fighter_id': opponent_id})
            else:
                opponent_id = await self.resolver.resolve(dispute, conn=db)

            if message_to_opponent and not opponent_id:
                raise ValidationError(
                    f'Dispute #{dispute_id} has no opponent to receive the admin message',
                    {'dispute_id': dispute_id}
                )
            if requires_opponent(rtype.value):
                if not opponent_id:
                    raise MissingParty(
                        f'Could not determine the opponent for dispute #{dispute_id}',
                        {'dispute_id': dispute_id, 'resolution_type': rtype.value}
                    )
                if not await self.db.get_fighter(opponent_id, conn=db):
                    raise NotFound(f'Opponent {opponent_id} not found', {'fighter_id': opponent_id})
            outcome['opponent_id'] = opponent_id

            claimed = await self.db.mark_dispute_resolved(
                dispute_id, rtype.value, resolution_text.strip(), admin_id,
                admin_notes=admin_notes, opponent_id=opponent_id,
                message_to_disputer=message_to_disputer, message_to_opponent=message_to_opponent,
                conn=db
            )
            if not claimed:
                raise AlreadyResolved(f'Dispute #{dispute_id} is already resolved', {'dispute_id': dispute_id})

            if rtype == ResolutionType.GIVE_WIN_TO_SUBMITTER:
                await self._award_win(db, dispute, opponent_id, outcome, events)
            elif get_suspension_days(rtype.value) or RESOLUTION_TYPES[rtype.value].get('permanent_ban'):
                await self._suspend(db, dispute, opponent_id, rtype, outcome, events)

            if message_to_disputer:
                await self.db.add_dispute_message(dispute_id, admin_id, 'admin', message_to_disputer, conn=db)
            if message_to_opponent:
                await self.db.add_dispute_message(dispute_id, admin_id, 'admin', message_to_opponent, conn=db)

            await self.db.log_action(
                'dispute_resolved', admin_id,
                f'Dispute #{dispute_id}: {rtype.value} (opponent {opponent_id})', conn=db
            )
            outcome['dispute'] = await self.db.get_dispute(dispute_id, conn=db)

        logger.info(f'Dispute #{dispute_id} resolved by {admin_id}: {rtype.value}')

        events.append(DisputeResolvedEvent(
            dispute_id=dispute_id,
            disputer_id=dispute['disputer_id'],
            opponent_id=opponent_id,
            resolution_type=rtype.value,
            resolution=resolution_text.strip(),
            resolved_by=admin_id,
            message_to_disputer=message_to_disputer,
            message_to_opponent=message_to_opponent,
        ))
        if self.notifications:
            await self.notifications.publish(events)

        return outcome

    async def _award_win(self, db: aiosqlite.Connection, dispute: Dict[str, Any], opponent_id: int,
                         outcome: Dict[str, Any], events: List[object]):
        """Win for the disputer, loss for the opponent, both through progression"""
        disputer = await self.db.get_fighter(dispute['disputer_id'], conn=db)
        if not disputer:
            raise NotFound(f"Fighter {dispute['disputer_id']} not found", {'fighter_id': dispute['disputer_id']})
        opponent = await self.db.get_fighter(opponent_id, conn=db)

        fight = None
        if dispute.get('fight_id'):
            fight = await self.db.get_scheduled_fight(dispute['fight_id'], conn=db)
        weight_class = (fight or {}).get('weight_class') or disputer.get('weight_class') or DEFAULT_WEIGHT_CLASS

        awarded = [
            (disputer, opponent, FightResult.WIN, AWARDED_WIN_NOTE),
            (opponent, disputer, FightResult.LOSS, AWARDED_LOSS_NOTE),
        ]
        for fighter, other, result, note in awarded:
            record, progression = await self.records.create_fight_record(
                db, fighter['user_id'],
                opponent_name=other['name'],
                result=result,
                method=FightMethod(AWARDED_WIN_METHOD),
                fight_round=AWARDED_FIGHT_ROUND,
                fight_date=date.today(),
                weight_class=weight_class,
                notes=note,
                events=events,
            )
            outcome['fight_records'].append(record)
            outcome['progression'].append(progression.to_dict())

        if fight:
            await self.db.update_scheduled_fight_status(fight['fight_id'], ScheduledFightStatus.COMPLETED.value, conn=db)

    async def _suspend(self, db: aiosqlite.Connection, dispute: Dict[str, Any], opponent_id: int,
                       rtype: ResolutionType, outcome: Dict[str, Any], events: List[object]):
        """Suspend or ban the opponent; an existing longer ban is never shortened"""
        permanent = bool(RESOLUTION_TYPES[rtype.value].get('permanent_ban'))

        if permanent:
            banned_until = PERMANENT_BAN_UNTIL
            reason = 'Dispute resolution: Banned from league'
        else:
            banned_until = datetime.now().replace(microsecond=0) + timedelta(days=get_suspension_days(rtype.value))
            reason = f"Dispute resolution: {rtype.value.replace('_', ' ')}"

        opponent = await self.db.get_fighter(opponent_id, conn=db)
        if opponent.get('banned_until'):
            existing = datetime.fromisoformat(opponent['banned_until'])
            if existing > banned_until:
                logger.info(f'Fighter {opponent_id} already banned until {existing}, keeping the longer ban')
                banned_until = existing
                reason = opponent.get('banned_reason') or reason
                permanent = existing >= PERMANENT_BAN_UNTIL

        await self.db.update_fighter(
            opponent_id, conn=db,
            banned_until=banned_until.isoformat(),
            banned_reason=reason
        )

        outcome['suspension'] = {
            'fighter_id': opponent_id,
            'banned_until': banned_until.isoformat(),
            'reason': reason,
            'permanent': permanent,
        }
        events.append(SuspensionEvent(
            fighter_id=opponent_id,
            dispute_id=dispute['dispute_id'],
            banned_until=banned_until,
            reason=reason,
            permanent=permanent,
        ))
        logger.info(f'Fighter {opponent_id} suspended until {banned_until.isoformat()} ({reason})')
