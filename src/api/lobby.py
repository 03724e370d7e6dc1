"""
Dixit Sync - Lobby Infos

Server-wide counters shown on the home screen.
"""

from src.api.client import FetchPolicy, GraphQLTransport
from src.api.models import LobbyInfos
from src.api.queries import GET_LOBBY_INFOS


def fetch_lobby_infos(transport: GraphQLTransport) -> LobbyInfos:
    """Fetch waiting game and connected player counts."""
    data = transport.query(GET_LOBBY_INFOS, fetch_policy=FetchPolicy.NETWORK_ONLY)
    return LobbyInfos.model_validate(data.get("lobbyInfos") or {})
