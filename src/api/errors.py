"""
Dixit Sync - Error Types

Failures raised by the GraphQL transport and the game API. The realtime
layer captures these into FetchState.error instead of letting them escape.
"""


class SyncError(Exception):
    """Base class for synchronization failures."""


class TransportError(SyncError):
    """A network or query failure talking to the game server."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MutationRejected(SyncError):
    """The server refused the start-game mutation (validation failure)."""

    def __init__(self, error_type: str) -> None:
        super().__init__(f"Start game rejected: {error_type}")
        self.error_type = error_type
