from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class AuthIdentity:
    uid: str
    email: Optional[str] = None
    created_at: Optional[str] = None


class AuthProvider(Protocol):
    def verify_token(self, token: str) -> Optional[AuthIdentity]:
        """Return the identity behind a bearer token, or None when it is not valid."""
        ...


class AuthAdmin(Protocol):
    def create_user(self, email: str, password: str) -> AuthIdentity:
        """Raises AuthUserExists when the email is already registered."""
        ...

    def set_password(self, user_id: str, password: str) -> AuthIdentity:
        """Raises AuthUserNotFound for an unknown id."""
        ...
