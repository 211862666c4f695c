"""
League Enumerations
Closed value sets for fight outcomes, dispute lifecycle and resolution decisions
"""

from enum import Enum


class FightResult(str, Enum):
    WIN = 'Win'
    LOSS = 'Loss'
    DRAW = 'Draw'


class FightMethod(str, Enum):
    UNANIMOUS_DECISION = 'UD'
    SPLIT_DECISION = 'SD'
    MAJORITY_DECISION = 'MD'
    KNOCKOUT = 'KO'
    TECHNICAL_KNOCKOUT = 'TKO'
    SUBMISSION = 'Submission'
    DISQUALIFICATION = 'DQ'
    NO_CONTEST = 'No Contest'
    NO_DECISION = 'No Decision'


class DisputeStatus(str, Enum):
    OPEN = 'Open'
    IN_REVIEW = 'In Review'
    RESOLVED = 'Resolved'


class DisputeCategory(str, Enum):
    CHEATING = 'cheating'
    SPAMMING = 'spamming'
    EXPLOITS = 'exploits'
    EXCESSIVE_PUNCHES = 'excessive_punches'
    STAMINA_DRAINING = 'stamina_draining'
    POWER_PUNCHES = 'power_punches'
    OTHER = 'other'


class ResolutionType(str, Enum):
    WARNING = 'warning'
    GIVE_WIN_TO_SUBMITTER = 'give_win_to_submitter'
    ONE_WEEK_SUSPENSION = 'one_week_suspension'
    TWO_WEEK_SUSPENSION = 'two_week_suspension'
    ONE_MONTH_SUSPENSION = 'one_month_suspension'
    BANNED_FROM_LEAGUE = 'banned_from_league'
    DISPUTE_INVALID = 'dispute_invalid'
    OTHER = 'other'


class SenderRole(str, Enum):
    FIGHTER = 'fighter'
    ADMIN = 'admin'


class TierTransition(str, Enum):
    NONE = 'none'
    PROMOTION = 'promotion'
    DEMOTION = 'demotion'


class ScheduledFightStatus(str, Enum):
    PENDING = 'Pending'
    SCHEDULED = 'Scheduled'
    COMPLETED = 'Completed'
    CANCELLED = 'Cancelled'
    DISPUTED = 'Disputed'
