"""Data models for the failover watchdog."""

from failover.models.models import (
    LivenessStatus,
    ConfigStatus,
    EngineState,
    Action,
    Transition,
    AlertEnvelope
)

__all__ = [
    'LivenessStatus',
    'ConfigStatus',
    'EngineState',
    'Action',
    'Transition',
    'AlertEnvelope'
]
