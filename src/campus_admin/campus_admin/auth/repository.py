from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

from .model import ActiveSession, AuditLogEntry, UserProfile


@dataclass(frozen=True)
class IdentityAccount:
    """An account in Firebase Authentication."""

    uid: str
    email: str
    display_name: Optional[str] = None


class IdentityAdmin(Protocol):
    """Admin-side identity provider operations.

    Implementations translate provider errors into core.exceptions:
    NotFoundError, WeakPasswordError, AccountExistsError, ValidationError,
    AuthenticationError.
    """

    def get_user_by_email(self, email: str) -> IdentityAccount:
        raise NotImplementedError

    def update_password(self, uid: str, password: str) -> None:
        raise NotImplementedError

    def create_user(self, *, email: str, password: str, display_name: str, email_verified: bool = False) -> str:
        raise NotImplementedError

    def verify_id_token(self, id_token: str) -> str:
        raise NotImplementedError


class PasswordSignIn(Protocol):
    def sign_in(self, email: str, password: str) -> str:
        """Return the uid for valid credentials, raise AuthenticationError otherwise."""
        raise NotImplementedError


class UserProfileRepository(Protocol):
    def get(self, uid: str) -> Optional[UserProfile]:
        raise NotImplementedError

    def save(self, profile: UserProfile) -> None:
        raise NotImplementedError


class ActiveSessionRepository(Protocol):
    def upsert(self, active: ActiveSession) -> None:
        raise NotImplementedError

    def touch(self, uid: str, *, last_seen: datetime) -> None:
        raise NotImplementedError

    def delete(self, uid: str) -> None:
        raise NotImplementedError


class AuditLogRepository(Protocol):
    def write(self, entry: AuditLogEntry) -> None:
        raise NotImplementedError
