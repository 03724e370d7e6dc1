"""
Dixit Sync - Test Configuration and Fixtures

Common fixtures and test data for all test modules.
"""

import threading
from typing import Any, Callable

import pytest

from src.api.models import GameSnapshot, GameStatus, PhaseSnapshot


# =============================================================================
# WIRE PAYLOADS
# =============================================================================

@pytest.fixture
def game_payload() -> Callable[..., dict[str, Any]]:
    """
    Factory for `game` objects as the server returns them.

    Returns:
        Function taking status, currentTurnId and game id overrides.
    """
    def make(
        status: str = "WAITING_FOR_PLAYERS",
        current_turn_id: str | None = None,
        game_id: str = "game-1",
    ) -> dict[str, Any]:
        return {
            "id": game_id,
            "currentTurnId": current_turn_id,
            "endCondition": {
                "__typename": "GameRemainingTurnsEndCondition",
                "remainingTurns": 5,
            },
            "status": status,
            "host": {"id": "user-1", "username": "Alice"},
            "players": [
                {"id": "user-1", "username": "Alice", "score": 0},
                {"id": "user-2", "username": "Bob", "score": 3},
            ],
        }

    return make


@pytest.fixture
def make_game(game_payload) -> Callable[..., GameSnapshot]:
    """Factory for parsed game snapshots."""
    def make(
        status: GameStatus = GameStatus.WAITING_FOR_PLAYERS,
        current_turn_id: str | None = None,
        game_id: str = "game-1",
    ) -> GameSnapshot:
        return GameSnapshot.model_validate(
            game_payload(status.value, current_turn_id, game_id)
        )

    return make


@pytest.fixture
def make_phase() -> Callable[..., PhaseSnapshot]:
    """Factory for turn phase snapshots."""
    def make(turn_id: str = "t1", kind: str = "StorytellerPhase") -> PhaseSnapshot:
        return PhaseSnapshot.model_validate({
            "__typename": kind,
            "id": f"phase-{turn_id}",
            "storytellerId": "user-1",
        })

    return make


# =============================================================================
# THREAD SYNCHRONIZATION
# =============================================================================

class Gate:
    """Blocks a fake request until released, and reports when it was reached."""

    def __init__(self) -> None:
        self.reached = threading.Event()
        self.released = threading.Event()

    def wait(self, timeout: float = 5) -> None:
        self.reached.set()
        self.released.wait(timeout)

    def release(self) -> None:
        self.released.set()


@pytest.fixture
def gate():
    g = Gate()
    yield g
    g.release()
