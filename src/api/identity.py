"""
Dixit Sync - Identity

Who the local player is. Sign-in itself lives in the login flow.
"""

from dataclasses import dataclass
from typing import Protocol


class IdentityProvider(Protocol):
    @property
    def current_user_id(self) -> str | None: ...


@dataclass(frozen=True)
class StaticIdentity:
    """Identity fixed at construction, e.g. after anonymous sign-in."""

    user_id: str | None = None

    @property
    def current_user_id(self) -> str | None:
        return self.user_id
