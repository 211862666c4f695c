"""
League Errors
Typed failures returned to callers of the league engine
"""

from typing import Optional


class LeagueError(Exception):
    """Base class for all league engine failures"""

    kind = 'league_error'

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict:
        return {'kind': self.kind, 'message': self.message, 'details': self.details}


class NotFound(LeagueError):
    """Referenced fighter, dispute or fight does not exist"""

    kind = 'not_found'


class InvalidTransition(LeagueError):
    """Dispute status change not allowed from its current status"""

    kind = 'invalid_transition'


class AlreadyResolved(InvalidTransition):
    """Dispute was resolved before this request could be applied"""

    kind = 'already_resolved'


class MissingParty(LeagueError):
    """Opponent could not be resolved for a resolution that needs one"""

    kind = 'missing_party'


class Unauthorized(LeagueError):
    kind = 'unauthorized'


class ValidationError(LeagueError):
    kind = 'validation_error'
