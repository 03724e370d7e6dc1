"""
Dixit Sync - Session State Types

Immutable containers for fetched resources and the session state built
from them. All classes are frozen dataclasses; transitions build new
instances instead of mutating.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from src.api.errors import MutationRejected, TransportError
from src.api.models import GameSnapshot, PhaseSnapshot

T = TypeVar("T")


class ErrorKind(Enum):
    """Where a failure captured into a FetchState came from."""

    TRANSPORT = "transport"
    MUTATION_REJECTED = "mutation_rejected"
    INVALID_RESPONSE = "invalid_response"


@dataclass(frozen=True)
class ErrorInfo:
    """
    A failure handed to the view layer for display.

    Attributes:
        kind: Category of the failure
        message: Human-readable description
        code: Server error type or HTTP status, when known
    """
    kind: ErrorKind
    message: str
    code: str | None = None

    @classmethod
    def from_exception(cls, exc: Exception) -> ErrorInfo:
        if isinstance(exc, MutationRejected):
            return cls(ErrorKind.MUTATION_REJECTED, str(exc), exc.error_type)
        if isinstance(exc, TransportError):
            code = str(exc.status_code) if exc.status_code is not None else None
            return cls(ErrorKind.TRANSPORT, str(exc), code)
        return cls(ErrorKind.INVALID_RESPONSE, str(exc))


@dataclass(frozen=True)
class FetchState(Generic[T]):
    """Loading flag, last error and last data of one remote resource."""
    loading: bool = False
    error: ErrorInfo | None = None
    data: T | None = None


@dataclass(frozen=True)
class SessionState:
    """
    Everything the game view knows about the current session.

    The poll flags are derived from the latest game snapshot by the
    reducer and are never set directly. The seen flags remember that a
    resource has delivered data at least once, even after its data is
    later cleared or replaced by an empty fetch.
    """
    game: FetchState[GameSnapshot] = field(default_factory=FetchState)
    phase: FetchState[PhaseSnapshot] = field(default_factory=FetchState)
    should_poll_game: bool = True
    should_poll_phase: bool = False
    # Set by the first fetch that carries data, never cleared.
    game_seen: bool = False
    phase_seen: bool = False

    @property
    def current_turn_id(self) -> str | None:
        if self.game.data is None:
            return None
        return self.game.data.current_turn_id
