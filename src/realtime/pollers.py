"""
Dixit Sync - Resource Pollers

Interval polling for the game and turn phase resources. Each poller runs
a daemon thread while started and hands every resolved fetch to a result
callback.

Requests are stamped with the poller's generation, which moves on every
start, stop and turn change. A result whose stamp is behind is dropped
under the session lock, so a stopped poller can never write again.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Hashable

from pydantic import ValidationError

from src.api.client import FetchPolicy
from src.api.errors import SyncError
from src.api.game import GameApi
from src.api.models import GameSnapshot, PhaseSnapshot
from src.state.base import ErrorInfo, FetchState

logger = logging.getLogger(__name__)

ResultCallback = Callable[[FetchState[Any]], None]

DEFAULT_POLL_INTERVAL = 2.0

_UNRESOLVED = object()


class IntervalPoller:
    """Start/stop lifecycle, generation tagging and the poll loop.

    Subclasses provide the subscription key and the request itself.
    The lock is shared with whoever owns the state the results go into;
    results are delivered while holding it.
    """

    resource = "resource"

    def __init__(
        self,
        on_result: ResultCallback,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        lock: threading.RLock | None = None,
    ) -> None:
        self._on_result = on_result
        self.interval = interval
        self._lock = lock or threading.RLock()
        self._generation = 0
        self._stop_event: threading.Event | None = None
        self._thread: threading.Thread | None = None
        self._resolved_key: Any = _UNRESOLVED

    @property
    def is_running(self) -> bool:
        return self._stop_event is not None

    @property
    def generation(self) -> int:
        return self._generation

    def start(self) -> None:
        """Begin interval polling. Safe to call while already polling."""
        with self._lock:
            if self._stop_event is not None:
                return
            key = self._key()
            if not self._can_start(key):
                logger.debug("Not starting %s poller: nothing to poll", self.resource)
                return

            self._generation += 1
            stop_event = threading.Event()
            self._stop_event = stop_event
            self._thread = threading.Thread(
                target=self._poll_loop,
                args=(self._generation, key, stop_event),
                daemon=True,
                name=f"poll-{self.resource}-{str(key)[:8]}",
            )
            self._thread.start()
            logger.info("Started polling %s %s every %.1fs", self.resource, key, self.interval)

    def stop(self) -> None:
        """Stop interval polling and drop anything still in flight."""
        with self._lock:
            if self._stop_event is None:
                return
            self._generation += 1
            self._stop_event.set()
            self._stop_event = None
            logger.info("Stopped polling %s", self.resource)

    def refetch(self) -> FetchState[Any]:
        """Fetch once from the network, outside the interval.

        The result is delivered like a poll result (unless the poller
        was restarted or stopped meanwhile) and also returned.
        """
        with self._lock:
            generation = self._generation
            key = self._key()
        result = self._fetch(key, FetchPolicy.NETWORK_ONLY)
        self._deliver(generation, key, result)
        return result

    def join(self, timeout: float | None = None) -> None:
        """Wait for the current poll thread to exit (after stop)."""
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    # -- Subclass hooks --------------------------------------------------

    def _key(self) -> Hashable:
        raise NotImplementedError

    def _can_start(self, key: Hashable) -> bool:
        return True

    def _request(self, key: Hashable, fetch_policy: FetchPolicy) -> Any:
        raise NotImplementedError

    # -- Poll loop -------------------------------------------------------

    def _poll_loop(
        self, generation: int, key: Hashable, stop_event: threading.Event
    ) -> None:
        """Fetch every interval until stopped."""
        first = True
        while not stop_event.is_set():
            try:
                if first:
                    self._deliver(generation, key, FetchState(loading=True), pending=True)
                result = self._fetch(key, FetchPolicy.NETWORK_ONLY)
                self._deliver(generation, key, result)
            except Exception:
                logger.exception("Polling error for %s %s", self.resource, key)
            first = False
            stop_event.wait(self.interval)

    def _fetch(self, key: Hashable, fetch_policy: FetchPolicy) -> FetchState[Any]:
        try:
            data = self._request(key, fetch_policy)
        except (SyncError, ValidationError) as exc:
            logger.warning("Fetching %s %s failed: %s", self.resource, key, exc)
            return FetchState(loading=False, error=ErrorInfo.from_exception(exc))
        return FetchState(loading=False, data=data)

    def _deliver(
        self,
        generation: int,
        key: Hashable,
        result: FetchState[Any],
        *,
        pending: bool = False,
    ) -> bool:
        """Hand a result to the callback unless it is stale."""
        with self._lock:
            if generation != self._generation:
                logger.debug(
                    "Dropping stale %s result (generation %d, current %d)",
                    self.resource, generation, self._generation,
                )
                return False
            if pending:
                # Loading signal only for a subscription that never resolved.
                if self._resolved_key == key:
                    return False
            else:
                self._resolved_key = key
            self._on_result(result)
            return True


class GamePoller(IntervalPoller):
    """Polls one game, always from the network."""

    resource = "game"

    def __init__(
        self,
        api: GameApi,
        game_id: str,
        on_result: Callable[[FetchState[GameSnapshot]], None],
        **kwargs: Any,
    ) -> None:
        super().__init__(on_result, **kwargs)
        self._api = api
        self.game_id = game_id

    def _key(self) -> Hashable:
        return self.game_id

    def _request(self, key: Hashable, fetch_policy: FetchPolicy) -> GameSnapshot | None:
        return self._api.get_game(key, fetch_policy=fetch_policy)


class PhasePoller(IntervalPoller):
    """Polls the phase of the current turn, always from the network."""

    resource = "phase"

    def __init__(
        self,
        api: GameApi,
        on_result: Callable[[FetchState[PhaseSnapshot]], None],
        *,
        turn_id: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(on_result, **kwargs)
        self._api = api
        self._turn_id = turn_id

    @property
    def turn_id(self) -> str | None:
        return self._turn_id

    def set_turn_id(self, turn_id: str | None) -> None:
        """Re-key the poller; a running subscription moves to the new turn."""
        with self._lock:
            if turn_id == self._turn_id:
                return
            logger.info("Turn changed from %s to %s", self._turn_id, turn_id)
            was_running = self.is_running
            if was_running:
                self.stop()
            else:
                # Invalidate any refetch still in flight for the old turn.
                self._generation += 1
            self._turn_id = turn_id
            if was_running:
                self.start()

    def _key(self) -> Hashable:
        return self._turn_id

    def _can_start(self, key: Hashable) -> bool:
        return key is not None

    def _request(self, key: Hashable, fetch_policy: FetchPolicy) -> PhaseSnapshot | None:
        if key is None:
            return None
        return self._api.get_turn_phase(key)
