"""
Dixit Sync API Layer.

GraphQL transport, wire models and game operations.
"""

from src.api.analytics import AnalyticsSink, LoggingAnalyticsSink
from src.api.client import FetchPolicy, GraphQLTransport, get_transport
from src.api.errors import MutationRejected, SyncError, TransportError
from src.api.game import GameApi
from src.api.identity import IdentityProvider, StaticIdentity
from src.api.lobby import fetch_lobby_infos
from src.api.models import (
    GamePlayer,
    GameSnapshot,
    GameStatus,
    LobbyInfos,
    PhaseSnapshot,
    RemainingTurnsEndCondition,
    ScoreLimitEndCondition,
)

__all__ = [
    "AnalyticsSink",
    "FetchPolicy",
    "GameApi",
    "GamePlayer",
    "GameSnapshot",
    "GameStatus",
    "GraphQLTransport",
    "IdentityProvider",
    "LobbyInfos",
    "LoggingAnalyticsSink",
    "MutationRejected",
    "PhaseSnapshot",
    "RemainingTurnsEndCondition",
    "ScoreLimitEndCondition",
    "StaticIdentity",
    "SyncError",
    "TransportError",
    "fetch_lobby_infos",
    "get_transport",
]
