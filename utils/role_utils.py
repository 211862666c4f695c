"""
Role Management Utilities
Identity and permission checks for league operations
"""

import logging
from typing import Dict, Any
from config import ADMIN_USER_IDS
from utils.errors import Unauthorized

logger = logging.getLogger('TantalusBot.RoleUtils')

class RoleManager:
    def __init__(self, database):
        self.db = database

    async def is_admin(self, user_id: int) -> bool:
        """Check if a user is a league admin (configured IDs or the admins table)"""
        if user_id in ADMIN_USER_IDS:
            return True
        return await self.db.is_admin(user_id)

    async def require_admin(self, user_id: int, action: str = 'perform this action'):
        if not await self.is_admin(user_id):
            logger.warning(f'User {user_id} attempted to {action} without admin rights')
            raise Unauthorized(f'Only admins can {action}', {'user_id': user_id})

    @staticmethod
    def is_dispute_participant(dispute: Dict[str, Any], user_id: int) -> bool:
        return user_id in (dispute.get('disputer_id'), dispute.get('opponent_id'))

    async def can_view_dispute(self, dispute: Dict[str, Any], user_id: int) -> bool:
        """Participants and admins may view a dispute"""
        return self.is_dispute_participant(dispute, user_id) or await self.is_admin(user_id)
