"""
Module 'session': surveillance de l'inactivité utilisateur et déconnexion forcée.
"""

from .events import EventTarget, InteractionKind, TRACKED_INTERACTIONS
from .monitor import (
    ActivityMonitor,
    AsyncioScheduler,
    MonitorState,
    INACTIVITY_THRESHOLD,
    POLL_INTERVAL,
    EXPIRY_MESSAGE,
)
from .auth import SupabaseAuthSession

__all__ = [
    "EventTarget",
    "InteractionKind",
    "TRACKED_INTERACTIONS",
    "ActivityMonitor",
    "AsyncioScheduler",
    "MonitorState",
    "INACTIVITY_THRESHOLD",
    "POLL_INTERVAL",
    "EXPIRY_MESSAGE",
    "SupabaseAuthSession",
]
