"""
Systems Package
Core business logic systems for TantalusBot
"""

from .points_system import PointsCalculator
from .tier_system import TierTable, TierDefinition
from .progression_system import ProgressionEngine, ProgressionResult
from .record_system import RecordSystem
from .opponent_resolver import OpponentResolver
from .dispute_state_machine import DisputeStateMachine
from .dispute_system import DisputeSystem
from .notification_system import NotificationSystem
from .notification_reconciler import NotificationReconciler, ChangeEvent, ChangeType

__all__ = [
    'PointsCalculator',
    'TierTable',
    'TierDefinition',
    'ProgressionEngine',
    'ProgressionResult',
    'RecordSystem',
    'OpponentResolver',
    'DisputeStateMachine',
    'DisputeSystem',
    'NotificationSystem',
    'NotificationReconciler',
    'ChangeEvent',
    'ChangeType'
]
