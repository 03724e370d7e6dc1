"""
Dixit Sync - GraphQL Documents

Query and mutation documents sent to the game server.
"""

GAME_FRAGMENT = """
fragment Game on Game {
  id
  currentTurnId
  endCondition {
    __typename
    ... on GameRemainingTurnsEndCondition {
      remainingTurns
    }
    ... on GameScoreLimitEndCondition {
      scoreLimit
    }
  }
  status
  host {
    id
    username: name
  }
  players {
    id
    username: name
    score
  }
}
"""

# Phase fields are owned by the phase renderers. They pass their own
# `fragment Phase on TurnPhase` to GameApi; the sync layer itself only
# needs the discriminator and the id.
PHASE_FRAGMENT = """
fragment Phase on TurnPhase {
  __typename
  id
}
"""

GET_GAME = (
    """
query GetGame($gameId: ID!) {
  game(gameId: $gameId) {
    ...Game
  }
}
"""
    + GAME_FRAGMENT
)

START_GAME = (
    """
mutation GameStartGame($startGameInput: GameStartGameInput!) {
  gameStartGame(startGameInput: $startGameInput) {
    __typename
    ... on GameStartGameResultError {
      type
    }
    ... on GameStartGameResultSuccess {
      game {
        ...Game
      }
    }
  }
}
"""
    + GAME_FRAGMENT
)

TURN_PHASE_QUERY = """
query GetTurnPhase($turnId: ID!) {
  getTurnPhase(turnId: $turnId) {
    ...Phase
  }
}
"""


def build_turn_phase_query(phase_fragment: str = PHASE_FRAGMENT) -> str:
    """Turn phase query selecting whatever *phase_fragment* selects."""
    if "fragment Phase on" not in phase_fragment:
        raise ValueError("phase_fragment must define `fragment Phase on ...`")
    return TURN_PHASE_QUERY + phase_fragment


GET_TURN_PHASE = build_turn_phase_query()

GET_LOBBY_INFOS = """
query GetLobbyInfos {
  lobbyInfos {
    waitingGames
    connectedPlayers
  }
}
"""
