"""
Dixit Sync - Game API

Typed access to the game, turn phase and start-game operations.
"""

from src.api.client import FetchPolicy, GraphQLTransport
from src.api.errors import MutationRejected
from src.api.models import GameSnapshot, PhaseSnapshot, StartGameResult
from src.api.queries import GET_GAME, PHASE_FRAGMENT, START_GAME, build_turn_phase_query


class GameApi:
    """Game operations on top of a GraphQL transport."""

    def __init__(
        self, transport: GraphQLTransport, *, phase_fragment: str = PHASE_FRAGMENT
    ) -> None:
        self.transport = transport
        # Phase renderers decide which phase fields are fetched.
        self.turn_phase_query = build_turn_phase_query(phase_fragment)

    def get_game(
        self,
        game_id: str,
        *,
        fetch_policy: FetchPolicy = FetchPolicy.CACHE_FIRST,
    ) -> GameSnapshot | None:
        """Fetch a game snapshot. Returns None if the server knows no such game."""
        data = self.transport.query(
            GET_GAME, {"gameId": game_id}, fetch_policy=fetch_policy
        )
        game = data.get("game")
        if game is None:
            return None
        return GameSnapshot.model_validate(game)

    def get_turn_phase(self, turn_id: str) -> PhaseSnapshot | None:
        """Fetch the current phase of a turn, always from the network."""
        data = self.transport.query(
            self.turn_phase_query,
            {"turnId": turn_id},
            fetch_policy=FetchPolicy.NETWORK_ONLY,
        )
        phase = data.get("getTurnPhase")
        if phase is None:
            return None
        return PhaseSnapshot.model_validate(phase)

    def start_game(self, game_id: str) -> GameSnapshot:
        """
        Start a game.

        Raises:
            MutationRejected: The server refused (already started, not
                enough players, ...).
            TransportError: The request itself failed.
            ValidationError: The response has no usable result.
        """
        data = self.transport.mutate(
            START_GAME, {"startGameInput": {"gameId": game_id}}
        )
        result = StartGameResult.model_validate(data.get("gameStartGame"))
        if result.is_error or result.game is None:
            raise MutationRejected(result.type or "UNKNOWN")
        return result.game
