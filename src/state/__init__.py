"""
Dixit Sync Session State.

Pure state types and transitions with zero network dependencies.
"""

from src.state.base import ErrorInfo, ErrorKind, FetchState, SessionState
from src.state.events import GameFetched, PhaseFetched, SessionEvent
from src.state.reducer import (
    apply,
    clear_phase_event,
    initial_state,
    should_poll_game,
    should_poll_phase,
)

__all__ = [
    # Data Classes
    "ErrorInfo",
    "FetchState",
    "SessionState",
    # Enums
    "ErrorKind",
    # Events
    "GameFetched",
    "PhaseFetched",
    "SessionEvent",
    # Transitions
    "apply",
    "clear_phase_event",
    "initial_state",
    "should_poll_game",
    "should_poll_phase",
]
