"""
Dixit Sync Realtime.

Polling, actions and session orchestration for a live game.
"""

from src.realtime.actions import GameActionCoordinator
from src.realtime.pollers import GamePoller, PhasePoller
from src.realtime.sync_manager import SessionOrchestrator, create_session

__all__ = [
    "GameActionCoordinator",
    "GamePoller",
    "PhasePoller",
    "SessionOrchestrator",
    "create_session",
]
