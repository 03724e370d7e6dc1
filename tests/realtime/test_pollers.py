"""Tests for src/realtime/pollers.py — interval polling and stale-result dropping."""

import logging
import threading
from unittest.mock import MagicMock

import pytest

from src.api.client import FetchPolicy
from src.api.errors import TransportError
from src.api.game import GameApi
from src.realtime.pollers import GamePoller, PhasePoller
from src.state.base import ErrorKind, FetchState


class Recorder:
    """Result callback that records results and signals on data."""

    def __init__(self) -> None:
        self.results: list[FetchState] = []
        self.got_data = threading.Event()

    def __call__(self, result: FetchState) -> None:
        self.results.append(result)
        if result.data is not None:
            self.got_data.set()

    @property
    def data(self) -> list:
        return [r.data for r in self.results if r.data is not None]


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def api():
    return MagicMock(spec=GameApi)


def _shutdown(poller):
    poller.stop()
    poller.join(5)


# ── GamePoller ──────────────────────────────────────────────────────────

class TestGamePoller:
    def test_emits_loading_then_data(self, api, recorder, make_game):
        api.get_game.return_value = make_game()
        poller = GamePoller(api, "game-1", recorder, interval=60)
        try:
            poller.start()
            assert recorder.got_data.wait(5)
        finally:
            _shutdown(poller)

        assert recorder.results[0] == FetchState(loading=True)
        assert recorder.results[1] == FetchState(loading=False, data=make_game())

    def test_first_request_hits_network(self, api, recorder, make_game):
        api.get_game.return_value = make_game()
        poller = GamePoller(api, "game-1", recorder, interval=60)
        try:
            poller.start()
            assert recorder.got_data.wait(5)
        finally:
            _shutdown(poller)

        api.get_game.assert_called_once_with("game-1", fetch_policy=FetchPolicy.NETWORK_ONLY)

    def test_later_ticks_hit_network(self, api, recorder, make_game):
        second_call = threading.Event()

        def get_game(game_id, fetch_policy):
            if api.get_game.call_count >= 2:
                second_call.set()
            return make_game()

        api.get_game.side_effect = get_game
        poller = GamePoller(api, "game-1", recorder, interval=0.01)
        try:
            poller.start()
            assert second_call.wait(5)
        finally:
            _shutdown(poller)

        assert api.get_game.call_args_list[1].kwargs["fetch_policy"] is FetchPolicy.NETWORK_ONLY

    def test_start_is_idempotent(self, api, recorder, gate, make_game):
        def get_game(game_id, fetch_policy):
            gate.wait()
            return make_game()

        api.get_game.side_effect = get_game
        poller = GamePoller(api, "game-1", recorder, interval=60)
        try:
            poller.start()
            thread = poller._thread
            poller.start()
            assert poller._thread is thread
            assert poller.generation == 1
            assert poller.is_running
        finally:
            gate.release()
            _shutdown(poller)

    def test_stop_is_idempotent(self, api, recorder):
        poller = GamePoller(api, "game-1", recorder, interval=60)
        poller.stop()
        poller.stop()
        assert poller.generation == 0
        assert not poller.is_running

    def test_stop_drops_in_flight_result(self, api, recorder, gate, make_game):
        def get_game(game_id, fetch_policy):
            gate.wait()
            return make_game()

        api.get_game.side_effect = get_game
        poller = GamePoller(api, "game-1", recorder, interval=60)
        poller.start()
        assert gate.reached.wait(5)

        poller.stop()
        gate.release()
        poller.join(5)

        assert recorder.data == []
        assert recorder.results == [FetchState(loading=True)]

    def test_restart_drops_result_from_previous_run(self, api, recorder, make_game):
        first_reached = threading.Event()
        release_first = threading.Event()
        calls = []

        def get_game(game_id, fetch_policy):
            calls.append(fetch_policy)
            if len(calls) == 1:
                first_reached.set()
                release_first.wait(5)
                return make_game(game_id="stale")
            return make_game()

        api.get_game.side_effect = get_game
        poller = GamePoller(api, "game-1", recorder, interval=60)
        poller.start()
        assert first_reached.wait(5)
        old_thread = poller._thread

        poller.stop()
        poller.start()
        try:
            assert recorder.got_data.wait(5)
            release_first.set()
            old_thread.join(5)
        finally:
            release_first.set()
            _shutdown(poller)

        assert [game.id for game in recorder.data] == ["game-1"]

    def test_transport_errors_carried_and_polling_continues(self, api, recorder):
        second_call = threading.Event()

        def get_game(game_id, fetch_policy):
            if api.get_game.call_count >= 2:
                second_call.set()
            raise TransportError("Server returned HTTP 502", status_code=502)

        api.get_game.side_effect = get_game
        poller = GamePoller(api, "game-1", recorder, interval=0.01)
        try:
            poller.start()
            assert second_call.wait(5)
        finally:
            _shutdown(poller)

        errors = [r for r in recorder.results if r.error is not None]
        assert errors
        assert errors[0].loading is False
        assert errors[0].error.kind == ErrorKind.TRANSPORT
        assert errors[0].error.code == "502"

    def test_unexpected_errors_logged_and_polling_continues(self, api, recorder, caplog):
        second_call = threading.Event()

        def get_game(game_id, fetch_policy):
            if api.get_game.call_count >= 2:
                second_call.set()
            raise RuntimeError("bug")

        api.get_game.side_effect = get_game
        poller = GamePoller(api, "game-1", recorder, interval=0.01)
        with caplog.at_level(logging.ERROR, logger="src.realtime.pollers"):
            try:
                poller.start()
                assert second_call.wait(5)
            finally:
                _shutdown(poller)

        assert "Polling error for game game-1" in caplog.text

    def test_loading_signal_only_until_first_result(self, api, recorder, make_game):
        api.get_game.return_value = make_game()
        poller = GamePoller(api, "game-1", recorder, interval=60)
        poller.start()
        assert recorder.got_data.wait(5)
        _shutdown(poller)

        recorder.results.clear()
        recorder.got_data.clear()
        poller.start()
        try:
            assert recorder.got_data.wait(5)
        finally:
            _shutdown(poller)

        assert all(not r.loading for r in recorder.results)

    def test_refetch_hits_network_and_delivers(self, api, recorder, make_game):
        api.get_game.return_value = make_game()
        poller = GamePoller(api, "game-1", recorder, interval=60)

        result = poller.refetch()

        assert result == FetchState(loading=False, data=make_game())
        assert recorder.results == [result]
        api.get_game.assert_called_once_with("game-1", fetch_policy=FetchPolicy.NETWORK_ONLY)
        assert not poller.is_running

    def test_invalid_response_carried(self, recorder):
        transport = MagicMock()
        transport.query.return_value = {"game": {"id": "game-1"}}
        poller = GamePoller(GameApi(transport), "game-1", recorder, interval=60)

        result = poller.refetch()

        assert result.data is None
        assert result.error.kind == ErrorKind.INVALID_RESPONSE


# ── PhasePoller ─────────────────────────────────────────────────────────

class TestPhasePoller:
    def test_start_without_turn_is_noop(self, api, recorder):
        poller = PhasePoller(api, recorder, interval=60)
        poller.start()

        assert not poller.is_running
        assert poller.generation == 0
        api.get_turn_phase.assert_not_called()

    def test_polls_current_turn(self, api, recorder, make_phase):
        api.get_turn_phase.return_value = make_phase("t1")
        poller = PhasePoller(api, recorder, turn_id="t1", interval=60)
        try:
            poller.start()
            assert recorder.got_data.wait(5)
        finally:
            _shutdown(poller)

        api.get_turn_phase.assert_called_once_with("t1")
        assert recorder.data == [make_phase("t1")]

    def test_turn_change_resubscribes(self, api, recorder, make_phase):
        polled_t2 = threading.Event()

        def get_turn_phase(turn_id):
            if turn_id == "t2":
                polled_t2.set()
            return make_phase(turn_id)

        api.get_turn_phase.side_effect = get_turn_phase
        poller = PhasePoller(api, recorder, turn_id="t1", interval=60)
        try:
            poller.start()
            assert recorder.got_data.wait(5)

            poller.set_turn_id("t2")
            assert poller.is_running
            assert poller.turn_id == "t2"
            assert poller.generation == 3
            assert polled_t2.wait(5)
        finally:
            _shutdown(poller)

    def test_turn_change_drops_old_turn_result(self, api, recorder, gate, make_phase):
        def get_turn_phase(turn_id):
            if turn_id == "t1":
                gate.wait()
            return make_phase(turn_id)

        api.get_turn_phase.side_effect = get_turn_phase
        poller = PhasePoller(api, recorder, turn_id="t1", interval=60)
        poller.start()
        assert gate.reached.wait(5)
        old_thread = poller._thread

        poller.set_turn_id("t2")
        try:
            assert recorder.got_data.wait(5)
            gate.release()
            old_thread.join(5)
        finally:
            _shutdown(poller)

        assert [phase.id for phase in recorder.data] == ["phase-t2"]

    def test_turn_change_drops_pending_refetch(self, api, recorder, gate, make_phase):
        def get_turn_phase(turn_id):
            gate.wait()
            return make_phase(turn_id)

        api.get_turn_phase.side_effect = get_turn_phase
        poller = PhasePoller(api, recorder, turn_id="t1", interval=60)

        worker = threading.Thread(target=poller.refetch)
        worker.start()
        assert gate.reached.wait(5)
        poller.set_turn_id("t2")
        gate.release()
        worker.join(5)

        assert recorder.results == []

    def test_clearing_turn_stops(self, api, recorder, make_phase):
        api.get_turn_phase.return_value = make_phase("t1")
        poller = PhasePoller(api, recorder, turn_id="t1", interval=60)
        poller.start()
        assert recorder.got_data.wait(5)

        poller.set_turn_id(None)
        poller.join(5)

        assert not poller.is_running
        assert poller.turn_id is None

    def test_same_turn_is_noop(self, api, recorder):
        poller = PhasePoller(api, recorder, turn_id="t1", interval=60)
        poller.set_turn_id("t1")
        assert poller.generation == 0
