"""
Dixit Sync - Session Orchestrator

High-level manager that owns the session state and keeps the game and
phase pollers in step with the poll flags the reducer derives. Provides
the surface the game view reads from.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from typing import Callable

from src.api.analytics import AnalyticsSink, LoggingAnalyticsSink
from src.api.client import GraphQLTransport, get_transport
from src.api.game import GameApi
from src.api.identity import IdentityProvider, StaticIdentity
from src.api.models import GameSnapshot, PhaseSnapshot
from src.api.queries import PHASE_FRAGMENT
from src.config.settings import get_settings
from src.realtime.actions import GameActionCoordinator
from src.realtime.pollers import DEFAULT_POLL_INTERVAL, GamePoller, PhasePoller
from src.state.base import FetchState, SessionState
from src.state.events import GameFetched, PhaseFetched, SessionEvent
from src.state.reducer import apply, initial_state

logger = logging.getLogger(__name__)

StateListener = Callable[[SessionState], None]


class SessionOrchestrator:
    """Single owner of one game session's state.

    Every state change goes through dispatch(), which applies the
    reducer, notifies listeners and reconciles the pollers, all under
    one re-entrant session lock.
    """

    def __init__(
        self,
        game_id: str,
        api: GameApi,
        *,
        analytics: AnalyticsSink | None = None,
        identity: IdentityProvider | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.game_id = game_id
        self._lock = threading.RLock()
        self._state = initial_state()
        self._listeners: list[StateListener] = []
        self._active = False

        self._game_poller = GamePoller(
            api, game_id, self._on_game_fetched,
            interval=poll_interval, lock=self._lock,
        )
        self._phase_poller = PhasePoller(
            api, self._on_phase_fetched,
            interval=poll_interval, lock=self._lock,
        )
        self._actions = GameActionCoordinator(
            api,
            game_id,
            get_state=lambda: self._state,
            dispatch=self.dispatch,
            analytics=analytics or LoggingAnalyticsSink(),
            identity=identity or StaticIdentity(),
            lock=self._lock,
        )

    # -- View surface ----------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def game(self) -> FetchState[GameSnapshot]:
        return self._state.game

    @property
    def phase(self) -> FetchState[PhaseSnapshot]:
        return self._state.phase

    @property
    def start_game_loading(self) -> bool:
        return self._actions.start_game_loading

    @property
    def game_poller(self) -> GamePoller:
        return self._game_poller

    @property
    def phase_poller(self) -> PhasePoller:
        return self._phase_poller

    def start_game(self) -> Future[FetchState[GameSnapshot]] | None:
        """Start the game; see GameActionCoordinator.start_game."""
        return self._actions.start_game()

    def refetch_game(self) -> FetchState[GameSnapshot]:
        """Fetch the game now instead of waiting for the next tick."""
        return self._game_poller.refetch()

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call *listener* with the new state after every change.

        Returns:
            A callable that removes the listener.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    # -- Lifecycle -------------------------------------------------------

    def open(self) -> SessionOrchestrator:
        """Start syncing: game polling begins from the initial state."""
        with self._lock:
            self._active = True
            self._reconcile()
        logger.info("Session opened for game %s", self.game_id)
        return self

    def close(self) -> None:
        """Stop both pollers and the action worker.

        Nothing that was in flight writes to the state afterwards. A closed
        session can be opened again.
        """
        with self._lock:
            self._active = False
            self._game_poller.stop()
            self._phase_poller.stop()
            self._actions.shutdown()
        logger.info("Session closed for game %s", self.game_id)

    def __enter__(self) -> SessionOrchestrator:
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- State changes ---------------------------------------------------

    def dispatch(self, event: SessionEvent) -> SessionState:
        """Apply an event, notify listeners and reconcile the pollers."""
        with self._lock:
            self._state = apply(self._state, event)
            state = self._state
            for listener in list(self._listeners):
                try:
                    listener(state)
                except Exception:
                    logger.exception("Session listener failed")
            if self._active:
                self._reconcile()
            return state

    def _on_game_fetched(self, payload: FetchState[GameSnapshot]) -> None:
        self.dispatch(GameFetched(payload))

    def _on_phase_fetched(self, payload: FetchState[PhaseSnapshot]) -> None:
        self.dispatch(PhaseFetched(payload))

    def _reconcile(self) -> None:
        """Bring poller running status in line with the poll flags."""
        state = self._state

        # Don't race a game fetch that is still in flight.
        if not state.game.loading:
            if state.should_poll_game and not self._game_poller.is_running:
                self._game_poller.start()
            elif not state.should_poll_game and self._game_poller.is_running:
                self._game_poller.stop()

        self._phase_poller.set_turn_id(state.current_turn_id)
        if state.should_poll_phase and not self._phase_poller.is_running:
            self._phase_poller.start()
        elif not state.should_poll_phase and self._phase_poller.is_running:
            self._phase_poller.stop()


# -- Module-level convenience functions ----------------------------------


def create_session(
    game_id: str,
    *,
    transport: GraphQLTransport | None = None,
    user_id: str | None = None,
    analytics: AnalyticsSink | None = None,
    phase_fragment: str = PHASE_FRAGMENT,
) -> SessionOrchestrator:
    """Build an orchestrator for a game from settings.

    Convenience function for use in the view layer. The session is not
    opened; call open() or use it as a context manager.

    Args:
        game_id: ID of the game to follow.
        transport: GraphQL transport; defaults to the cached one.
        user_id: Local player's ID, reported with analytics events.
        analytics: Analytics sink; defaults to logging when enabled.
        phase_fragment: `fragment Phase on TurnPhase` selecting the phase
            fields the view renders.
    """
    settings = get_settings()
    api = GameApi(transport or get_transport(), phase_fragment=phase_fragment)
    return SessionOrchestrator(
        game_id,
        api,
        analytics=analytics or LoggingAnalyticsSink(enabled=settings.analytics_enabled),
        identity=StaticIdentity(user_id),
        poll_interval=settings.poll_interval,
    )
