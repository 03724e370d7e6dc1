"""
Dixit Sync - Session Events

Inputs to the session reducer.
"""

from dataclasses import dataclass

from src.api.models import GameSnapshot, PhaseSnapshot
from src.state.base import FetchState


@dataclass(frozen=True)
class GameFetched:
    """A game fetch resolved, from a poll, a refetch or the start mutation."""

    payload: FetchState[GameSnapshot]


@dataclass(frozen=True)
class PhaseFetched:
    """A phase fetch resolved, or the phase is being cleared."""

    payload: FetchState[PhaseSnapshot]


SessionEvent = GameFetched | PhaseFetched
