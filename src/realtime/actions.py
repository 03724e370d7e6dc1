"""
Dixit Sync - Game Actions

Player-triggered mutations whose results are folded straight into the
session state instead of waiting for the next poll.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable

from pydantic import ValidationError

from src.api.analytics import AnalyticsSink
from src.api.errors import SyncError
from src.api.game import GameApi
from src.api.identity import IdentityProvider
from src.api.models import GameSnapshot, GameStatus
from src.state.base import ErrorInfo, FetchState, SessionState
from src.state.events import GameFetched, SessionEvent
from src.state.reducer import clear_phase_event

logger = logging.getLogger(__name__)

GAME_STARTED_EVENT = "game_started"


class GameActionCoordinator:
    """Issues the start-game mutation and folds its result into state.

    The mutation runs on a single worker thread. Reads of the current
    state and the dispatches that follow them happen under the session
    lock.
    """

    def __init__(
        self,
        api: GameApi,
        game_id: str,
        *,
        get_state: Callable[[], SessionState],
        dispatch: Callable[[SessionEvent], None],
        analytics: AnalyticsSink,
        identity: IdentityProvider,
        lock: threading.RLock | None = None,
    ) -> None:
        self._api = api
        self.game_id = game_id
        self._get_state = get_state
        self._dispatch = dispatch
        self._analytics = analytics
        self._identity = identity
        self._lock = lock or threading.RLock()
        self._executor: ThreadPoolExecutor | None = None
        # Moves on every shutdown; results from an older generation are dropped.
        self._generation = 0
        self._pending: Future[FetchState[GameSnapshot]] | None = None

    @property
    def start_game_loading(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def start_game(self) -> Future[FetchState[GameSnapshot]] | None:
        """
        Start the game.

        Clears the phase right away, then runs the mutation in the
        background. Returns None without doing anything if a start is
        already pending or the game is past the waiting status.
        """
        with self._lock:
            if self.start_game_loading:
                logger.debug("Start game already pending for %s", self.game_id)
                return None

            state = self._get_state()
            game = state.game.data
            if game is not None and game.status != GameStatus.WAITING_FOR_PLAYERS:
                logger.debug("Game %s is %s, not starting", self.game_id, game.status.value)
                return None

            self._analytics.log_event(
                GAME_STARTED_EVENT,
                {"userId": self._identity.current_user_id, "gameId": self.game_id},
            )
            self._dispatch(clear_phase_event(state))
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="start-game"
                )
            self._pending = self._executor.submit(self._run_start_game, self._generation)
            return self._pending

    def _run_start_game(self, generation: int) -> FetchState[GameSnapshot]:
        try:
            game = self._api.start_game(self.game_id)
        except (SyncError, ValidationError) as exc:
            logger.warning("Starting game %s failed: %s", self.game_id, exc)
            error = ErrorInfo.from_exception(exc)
            with self._lock:
                previous = self._get_state().game.data
                result = FetchState(loading=False, error=error, data=previous)
                self._fold(generation, result)
            return result

        logger.info("Game %s started, turn %s", self.game_id, game.current_turn_id)
        result = FetchState(loading=False, data=game)
        with self._lock:
            self._fold(generation, result)
        return result

    def _fold(self, generation: int, result: FetchState[GameSnapshot]) -> None:
        if generation != self._generation:
            logger.debug("Dropping start game result for %s after shutdown", self.game_id)
            return
        self._dispatch(GameFetched(result))

    def shutdown(self) -> None:
        """Drop any in-flight start result and release the worker.

        The coordinator stays usable: the next start_game() gets a new worker.
        """
        with self._lock:
            self._generation += 1
            executor, self._executor = self._executor, None
            self._pending = None
        if executor is not None:
            executor.shutdown(wait=False)
