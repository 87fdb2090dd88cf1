"""
Session provider interface.

Call sites receive the current ``Identity`` as an argument; nothing in this
package looks the user up from ambient state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


class NotAuthenticatedError(Exception):
    """Raised when an operation needs a signed-in user and none is given."""


@dataclass(frozen=True)
class Identity:
    """Opaque identity of the signed-in user."""

    user_id: str
    email: Optional[str] = None


def require_identity(identity: Optional[Identity]) -> Identity:
    if identity is None or not identity.user_id:
        raise NotAuthenticatedError("A signed-in user is required")
    return identity


class SessionProvider(ABC):
    """Sign-in lifecycle and access to the current identity."""

    @abstractmethod
    def current_identity(self) -> Optional[Identity]:
        ...

    @abstractmethod
    def sign_in(self, identity: Identity) -> None:
        ...

    @abstractmethod
    def sign_out(self) -> None:
        ...


class StaticSessionProvider(SessionProvider):
    """In-process session holding at most one identity."""

    def __init__(self, identity: Optional[Identity] = None):
        self._identity = identity

    def current_identity(self) -> Optional[Identity]:
        return self._identity

    def sign_in(self, identity: Identity) -> None:
        self._identity = identity

    def sign_out(self) -> None:
        self._identity = None
