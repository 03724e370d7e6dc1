"""
Dixit Sync - Wire Models

Pydantic models that mirror the GraphQL response shapes for games,
turn phases and lobby infos.
"""

from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, Field


class GameStatus(str, Enum):
    """Lifecycle status of a game as reported by the server."""

    WAITING_FOR_PLAYERS = "WAITING_FOR_PLAYERS"
    STARTED = "STARTED"
    ENDED = "ENDED"


class RemainingTurnsEndCondition(BaseModel):
    """Game ends after a fixed number of turns."""

    typename: Literal["GameRemainingTurnsEndCondition"] = Field(
        default="GameRemainingTurnsEndCondition", alias="__typename"
    )
    remaining_turns: int = Field(alias="remainingTurns")

    model_config = {"populate_by_name": True, "frozen": True}


class ScoreLimitEndCondition(BaseModel):
    """Game ends once a player reaches the score limit."""

    typename: Literal["GameScoreLimitEndCondition"] = Field(
        default="GameScoreLimitEndCondition", alias="__typename"
    )
    score_limit: int = Field(alias="scoreLimit")

    model_config = {"populate_by_name": True, "frozen": True}


EndCondition = Union[RemainingTurnsEndCondition, ScoreLimitEndCondition]


class GameHost(BaseModel):
    id: str
    username: str

    model_config = {"frozen": True}


class GamePlayer(BaseModel):
    id: str
    username: str
    score: int = 0

    model_config = {"frozen": True}


class GameSnapshot(BaseModel):
    """Last known state of a game. Replaced wholesale on every fetch."""

    id: str
    current_turn_id: str | None = Field(default=None, alias="currentTurnId")
    status: GameStatus
    end_condition: EndCondition | None = Field(default=None, alias="endCondition")
    host: GameHost | None = None
    players: tuple[GamePlayer, ...] = ()

    model_config = {"populate_by_name": True, "frozen": True}


class PhaseSnapshot(BaseModel):
    """
    Turn phase payload.

    Only the phase kind and id are typed here; the rest of the payload
    belongs to the phase renderers and is kept as extra fields.
    """

    typename: str | None = Field(default=None, alias="__typename")
    id: str | None = None

    model_config = {"populate_by_name": True, "frozen": True, "extra": "allow"}

    @property
    def extra_fields(self) -> dict[str, Any]:
        """Untyped phase fields, keyed as received."""
        return dict(self.model_extra or {})


class StartGameResult(BaseModel):
    """Union result of the start-game mutation."""

    typename: str = Field(alias="__typename")
    game: GameSnapshot | None = None
    type: str | None = None

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def is_error(self) -> bool:
        return self.typename == "GameStartGameResultError"


class LobbyInfos(BaseModel):
    """Server-wide lobby counters."""

    waiting_games: int = Field(default=0, alias="waitingGames")
    connected_players: int = Field(default=0, alias="connectedPlayers")

    model_config = {"populate_by_name": True, "frozen": True}
