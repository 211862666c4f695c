"""
Dispute State Machine
Dispute status transitions and who may cause them
"""

from typing import Dict, Optional, Set, Any
from utils.enums import DisputeStatus, SenderRole
from utils.errors import InvalidTransition, AlreadyResolved, Unauthorized


class DisputeStateMachine:
    """Validates dispute status changes; status never moves backwards"""

    VALID_TRANSITIONS: Dict[Optional[str], Set[str]] = {
        None: {DisputeStatus.OPEN.value},
        DisputeStatus.OPEN.value: {
            DisputeStatus.IN_REVIEW.value,
            DisputeStatus.RESOLVED.value,
        },
        DisputeStatus.IN_REVIEW.value: {
            DisputeStatus.RESOLVED.value,
        },
        DisputeStatus.RESOLVED.value: set(),
    }

    @classmethod
    def is_valid_transition(cls, current_status: Optional[str], new_status: str) -> bool:
        return new_status in cls.VALID_TRANSITIONS.get(current_status, set())

    @classmethod
    def get_valid_transitions(cls, current_status: Optional[str]) -> Set[str]:
        return set(cls.VALID_TRANSITIONS.get(current_status, set()))

    @classmethod
    def is_terminal_state(cls, status: str) -> bool:
        return not cls.VALID_TRANSITIONS.get(status)

    @staticmethod
    def is_participant(dispute: Dict[str, Any], user_id: int) -> bool:
        return user_id in (dispute.get('disputer_id'), dispute.get('opponent_id'))

    @classmethod
    def check_can_mark_in_review(cls, dispute: Dict[str, Any], is_admin: bool) -> bool:
        """
        Check an admin review request

        Returns:
            True if the dispute should move to In Review, False if the
            request is a no-op (already in review or resolved)
        """
        if not is_admin:
            raise Unauthorized('Only admins can review disputes')

        return cls.is_valid_transition(dispute['status'], DisputeStatus.IN_REVIEW.value)

    @classmethod
    def check_can_message(cls, dispute: Dict[str, Any], sender_id: int, sender_role: SenderRole,
                          is_admin: bool) -> Optional[str]:
        """
        Check a message post against the dispute's status and participants

        Returns:
            The status the dispute should move to, or None to leave it unchanged

        Raises:
            Unauthorized: If the sender is neither a participant nor an admin
            InvalidTransition: If the dispute is resolved
        """
        if sender_role == SenderRole.ADMIN:
            if not is_admin:
                raise Unauthorized('Only admins can post admin messages')
        elif not cls.is_participant(dispute, sender_id):
            raise Unauthorized('Only the dispute participants can post messages')

        if cls.is_terminal_state(dispute['status']):
            raise InvalidTransition(
                f"Dispute #{dispute['dispute_id']} is resolved and no longer accepts messages",
                {'dispute_id': dispute['dispute_id'], 'status': dispute['status']}
            )

        if sender_role == SenderRole.ADMIN and dispute['status'] == DisputeStatus.OPEN.value:
            return DisputeStatus.IN_REVIEW.value

        return None

    @classmethod
    def check_can_resolve(cls, dispute: Dict[str, Any], is_admin: bool):
        """
        Raises:
            Unauthorized: If the caller is not an admin
            AlreadyResolved: If the dispute is already resolved
        """
        if not is_admin:
            raise Unauthorized('Only admins can resolve disputes')

        if not cls.is_valid_transition(dispute['status'], DisputeStatus.RESOLVED.value):
            raise AlreadyResolved(
                f"Dispute #{dispute['dispute_id']} is already resolved",
                {'dispute_id': dispute['dispute_id'], 'status': dispute['status']}
            )
