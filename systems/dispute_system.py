"""
Dispute System
Opening, reviewing and discussing disputes over fight results
"""

import logging
from typing import Optional, Dict, Any, List
from database.models import Database
from systems.dispute_state_machine import DisputeStateMachine
from systems.events import DisputeOpenedEvent
from systems.opponent_resolver import OpponentResolver
from utils.enums import DisputeStatus, SenderRole, ScheduledFightStatus
from utils.errors import NotFound, ValidationError, Unauthorized
from utils.role_utils import RoleManager
from utils.validators import Validators

logger = logging.getLogger('TantalusBot.Disputes')

class DisputeSystem:
    def __init__(self, database: Database, role_manager: RoleManager,
                 opponent_resolver: Optional[OpponentResolver] = None, notification_system=None):
        self.db = database
        self.roles = role_manager
        self.resolver = opponent_resolver or OpponentResolver(database)
        self.notifications = notification_system

    async def open_dispute(self, disputer_id: int, category: str, reason: str,
                           opponent_id: Optional[int] = None, opponent_name: Optional[str] = None,
                           evidence_urls: Optional[List[str]] = None, fight_id: Optional[int] = None,
                           fight_link: Optional[str] = None) -> Dict[str, Any]:
        """
        Open a dispute against an opponent

        The opponent may be given by ID, by display name or through a
        scheduled fight. When it can be resolved now it is stored on the
        dispute; otherwise resolution is retried when an admin resolves it.

        Returns:
            The created dispute

        Raises:
            ValidationError: Invalid category, reason, evidence or no opponent reference
            NotFound: Unknown disputer, opponent or scheduled fight
        """
        valid, error = Validators.validate_dispute_request(reason, category, evidence_urls)
        if not valid:
            raise ValidationError(error)

        if fight_link and not Validators.is_url(fight_link):
            raise ValidationError(f'Invalid fight link: {fight_link}')

        opponent_name = opponent_name.strip() if opponent_name else None
        if opponent_id is None and not opponent_name and fight_id is None:
            raise ValidationError('An opponent ID, opponent name or scheduled fight is required')

        if opponent_id is not None and opponent_id == disputer_id:
            raise ValidationError('You cannot open a dispute against yourself')

        category_value = Validators.parse_category(category).value

        async with self.db.transaction() as db:
            disputer = await self.db.get_fighter(disputer_id, conn=db)
            if not disputer:
                raise NotFound(f'Fighter {disputer_id} not found', {'fighter_id': disputer_id})

            if opponent_id is not None and not await self.db.get_fighter(opponent_id, conn=db):
                raise NotFound(f'Opponent {opponent_id} not found', {'fighter_id': opponent_id})

            if fight_id is not None and not await self.db.get_scheduled_fight(fight_id, conn=db):
                raise NotFound(f'Scheduled fight {fight_id} not found', {'fight_id': fight_id})

            resolved_opponent = await self.resolver.resolve({
                'disputer_id': disputer_id,
                'opponent_id': opponent_id,
                'opponent_name': opponent_name,
                'fight_id': fight_id,
            }, conn=db)

            dispute_id = await self.db.create_dispute(
                disputer_id, category_value, reason.strip(),
                opponent_id=resolved_opponent, opponent_name=opponent_name,
                fight_id=fight_id, fight_link=fight_link, evidence_urls=evidence_urls, conn=db
            )

            if fight_id is not None:
                await self.db.update_scheduled_fight_status(fight_id, ScheduledFightStatus.DISPUTED.value, conn=db)

            await self.db.log_action(
                'dispute_opened', disputer_id,
                f'Dispute #{dispute_id} ({category_value}) against {resolved_opponent or opponent_name}',
                conn=db
            )
            dispute = await self.db.get_dispute(dispute_id, conn=db)

        logger.info(f'Dispute #{dispute_id} opened by {disputer_id}')

        if self.notifications:
            await self.notifications.publish([DisputeOpenedEvent(
                dispute_id=dispute_id,
                disputer_id=disputer_id,
                opponent_id=resolved_opponent,
                category=category_value,
                reason=dispute['reason'],
            )])

        return dispute

    async def get_dispute(self, dispute_id: int) -> Dict[str, Any]:
        dispute = await self.db.get_dispute(dispute_id)
        if not dispute:
            raise NotFound(f'Dispute #{dispute_id} not found', {'dispute_id': dispute_id})
        return dispute

    async def view_dispute(self, dispute_id: int, viewer_id: Optional[int] = None,
                           as_admin: bool = False) -> Dict[str, Any]:
        """
        Read a dispute with its message thread

        Viewing never changes the dispute's status, including for admins.
        """
        dispute = await self.get_dispute(dispute_id)

        if as_admin and viewer_id is not None:
            await self.roles.require_admin(viewer_id, 'view disputes as an admin')
        elif viewer_id is not None and not await self.roles.can_view_dispute(dispute, viewer_id):
            raise Unauthorized('Only participants and admins can view this dispute', {'dispute_id': dispute_id})

        dispute['messages'] = await self.db.get_dispute_messages(dispute_id)
        dispute['valid_transitions'] = sorted(DisputeStateMachine.get_valid_transitions(dispute['status']))
        return dispute

    async def mark_in_review(self, dispute_id: int, admin_id: int) -> Dict[str, Any]:
        """Move an open dispute to In Review (no-op when already past Open)"""
        is_admin = await self.roles.is_admin(admin_id)

        async with self.db.transaction() as db:
            dispute = await self.db.get_dispute(dispute_id, conn=db)
            if not dispute:
                raise NotFound(f'Dispute #{dispute_id} not found', {'dispute_id': dispute_id})

            if DisputeStateMachine.check_can_mark_in_review(dispute, is_admin):
                await self.db.advance_dispute_status(
                    dispute_id, DisputeStatus.OPEN.value, DisputeStatus.IN_REVIEW.value, conn=db
                )
                await self.db.log_action('dispute_in_review', admin_id, f'Dispute #{dispute_id}', conn=db)
                logger.info(f'Dispute #{dispute_id} marked In Review by {admin_id}')

            return await self.db.get_dispute(dispute_id, conn=db)

    async def post_message(self, dispute_id: int, sender_id: int, sender_role: str, body: str) -> Dict[str, Any]:
        """
        Append a message to a dispute thread

        An admin message on an Open dispute moves it to In Review.

        Returns:
            Dict with the message and the dispute's status after posting
        """
        valid, error = Validators.validate_message_body(body)
        if not valid:
            raise ValidationError(error)

        role = Validators.parse_sender_role(sender_role)
        if role is None:
            raise ValidationError(f'Invalid sender role: {sender_role}')

        is_admin = await self.roles.is_admin(sender_id)

        async with self.db.transaction() as db:
            dispute = await self.db.get_dispute(dispute_id, conn=db)
            if not dispute:
                raise NotFound(f'Dispute #{dispute_id} not found', {'dispute_id': dispute_id})

            # Opponent may have registered after the dispute was opened
            if dispute.get('opponent_id') is None and dispute['status'] != DisputeStatus.RESOLVED.value:
                opponent_id = await self.resolver.resolve(dispute, conn=db)
                if opponent_id and await self.db.set_dispute_opponent(dispute_id, opponent_id, conn=db):
                    dispute['opponent_id'] = opponent_id
                    logger.info(f'Dispute #{dispute_id} opponent resolved to {opponent_id}')

            next_status = DisputeStateMachine.check_can_message(dispute, sender_id, role, is_admin)

            message_id = await self.db.add_dispute_message(dispute_id, sender_id, role.value, body.strip(), conn=db)

            status = dispute['status']
            if next_status and await self.db.advance_dispute_status(dispute_id, status, next_status, conn=db):
                status = next_status
                logger.info(f'Dispute #{dispute_id} moved to {next_status} after admin message')

        return {
            'message_id': message_id,
            'dispute_id': dispute_id,
            'sender_id': sender_id,
            'sender_role': role.value,
            'message': body.strip(),
            'dispute_status': status,
        }

    async def get_messages(self, dispute_id: int) -> List[Dict[str, Any]]:
        await self.get_dispute(dispute_id)
        return await self.db.get_dispute_messages(dispute_id)

    async def list_disputes(self, fighter_id: Optional[int] = None,
                            status: Optional[str] = None) -> List[Dict[str, Any]]:
        if status is not None and status not in {s.value for s in DisputeStatus}:
            raise ValidationError(f'Invalid dispute status: {status}')
        return await self.db.get_disputes(fighter_id=fighter_id, status=status)

    async def purge_resolved(self, admin_id: int) -> int:
        """Delete all resolved disputes and their messages"""
        await self.roles.require_admin(admin_id, 'delete resolved disputes')

        deleted = await self.db.delete_resolved_disputes()
        await self.db.log_action('disputes_purged', admin_id, f'Deleted {deleted} resolved disputes')
        logger.info(f'Admin {admin_id} deleted {deleted} resolved disputes')
        return deleted
