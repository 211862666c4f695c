"""
Domain Events
Immutable records of committed league changes, published to the notification sink
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class TierChangeEvent:
    fighter_id: int
    fighter_name: str
    from_tier: str
    to_tier: str
    transition: str  # TierTransition value
    reason: str
    points: int


@dataclass(frozen=True)
class DisputeOpenedEvent:
    dispute_id: int
    disputer_id: int
    opponent_id: Optional[int]
    category: str
    reason: str


@dataclass(frozen=True)
class DisputeResolvedEvent:
    dispute_id: int
    disputer_id: int
    opponent_id: Optional[int]
    resolution_type: str
    resolution: str
    resolved_by: int
    message_to_disputer: Optional[str] = None
    message_to_opponent: Optional[str] = None


@dataclass(frozen=True)
class SuspensionEvent:
    fighter_id: int
    dispute_id: int
    banned_until: datetime
    reason: str
    permanent: bool = False
