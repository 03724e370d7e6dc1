"""
Dixit Sync - Session Reducer

The single point of session state change.

Design principles:
- Pure function: (state, event) -> new_state
- No I/O, no timers, no hidden mutation
- Poll eligibility is decided here and nowhere else
"""

from __future__ import annotations

from dataclasses import replace

from src.api.models import GameSnapshot, GameStatus
from src.state.base import FetchState, SessionState
from src.state.events import GameFetched, PhaseFetched, SessionEvent

# Statuses in which the game resource itself must keep being polled
_GAME_POLL_STATUSES = frozenset({GameStatus.WAITING_FOR_PLAYERS, GameStatus.ENDED})


def initial_state() -> SessionState:
    """State of a freshly opened session: poll the game, nothing loaded."""
    return SessionState()


def should_poll_game(game: GameSnapshot | None) -> bool:
    """Whether the game resource needs continued polling."""
    if game is None:
        return True
    return game.status in _GAME_POLL_STATUSES or game.current_turn_id is None


def should_poll_phase(game: GameSnapshot | None) -> bool:
    """Whether the turn phase resource needs continued polling."""
    if game is None:
        return False
    if game.status != GameStatus.STARTED:
        return False
    return game.current_turn_id is not None


def _latch(seen: bool, payload: FetchState) -> FetchState:
    # Once data has been seen, never go back to loading.
    loading = False if seen else payload.loading
    return replace(payload, loading=loading)


def apply(state: SessionState, event: SessionEvent) -> SessionState:
    """Apply an event and return the next session state."""
    if isinstance(event, GameFetched):
        game = event.payload.data
        seen = state.game_seen or state.game.data is not None
        return replace(
            state,
            game=_latch(seen, event.payload),
            game_seen=seen or game is not None,
            should_poll_game=should_poll_game(game),
            should_poll_phase=should_poll_phase(game),
        )

    if isinstance(event, PhaseFetched):
        seen = state.phase_seen or state.phase.data is not None
        return replace(
            state,
            phase=_latch(seen, event.payload),
            phase_seen=seen or event.payload.data is not None,
        )

    raise TypeError(f"Unknown session event: {event!r}")


def clear_phase_event(state: SessionState) -> PhaseFetched:
    """Event that drops the phase data while keeping loading and error."""
    return PhaseFetched(
        FetchState(loading=state.phase.loading, error=state.phase.error, data=None)
    )
