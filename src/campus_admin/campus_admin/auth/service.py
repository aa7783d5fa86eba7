from __future__ import annotations

import logging
from typing import Optional

from ..common.datetime_utils import now_utc
from ..common.validators import normalize_email, require_non_empty
from ..core.enums import LogAction
from ..core.exceptions import AuthenticationError
from .model import (
    UNAUTHENTICATED,
    ActiveSession,
    AuditLogEntry,
    Authenticated,
    SessionState,
    UserRef,
)
from .repository import ActiveSessionRepository, AuditLogRepository, PasswordSignIn, UserProfileRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: sign in / sign out / resolve the signed-in identity."""

    def __init__(
        self,
        sign_in: PasswordSignIn,
        profiles: UserProfileRepository,
        sessions: ActiveSessionRepository,
        audit: AuditLogRepository,
    ):
        self._sign_in = sign_in
        self._profiles = profiles
        self._sessions = sessions
        self._audit = audit

    def sign_in(self, email: str, password: str, *, user_agent: str = "unknown", platform: str = "unknown") -> UserRef:
        email = normalize_email(require_non_empty(email, "Email"))
        require_non_empty(password, "Password")

        uid = self._sign_in.sign_in(email, password)

        profile = self._profiles.get(uid)
        if profile is None:
            self._audit.write(
                AuditLogEntry(
                    action=LogAction.LOGIN_FAILED.value,
                    message="User profile missing in Firestore",
                    uid=uid,
                    email=email,
                )
            )
            raise AuthenticationError("User profile missing in Firestore users collection")

        now = now_utc()
        try:
            self._sessions.upsert(
                ActiveSession(
                    uid=uid,
                    email=profile.email or email,
                    role=profile.role,
                    name=profile.name,
                    login_at=now,
                    last_seen=now,
                    user_agent=user_agent,
                    platform=platform,
                )
            )
        except Exception:
            logger.exception("Failed to create active session for %s", uid)

        self._audit.write(
            AuditLogEntry(
                action=LogAction.LOGIN_SUCCESS.value,
                message=f"{profile.role.value} user logged in successfully",
                uid=uid,
                email=profile.email or email,
                role=profile.role.value,
                metadata={"platform": platform},
            )
        )
        return profile.to_user_ref(login_time=now)

    def sign_out(self, user: Optional[UserRef]) -> None:
        if user is None:
            return
        try:
            self._sessions.delete(user.uid)
            self._audit.write(
                AuditLogEntry(
                    action=LogAction.LOGOUT.value,
                    message=f"{user.role.value} user logged out",
                    uid=user.uid,
                    email=user.email,
                    role=user.role.value,
                )
            )
        except Exception:
            logger.exception("Error cleaning up session for %s", user.uid)

    def resolve(self, uid: Optional[str]) -> SessionState:
        """Rebuild the session state for a stored uid."""
        if not uid:
            return UNAUTHENTICATED
        try:
            profile = self._profiles.get(uid)
        except Exception:
            logger.exception("Auth state lookup failed for %s", uid)
            return UNAUTHENTICATED
        if profile is None:
            logger.error("User document not found in Firestore. UID: %s", uid)
            return UNAUTHENTICATED
        return Authenticated(profile.to_user_ref())

    def touch(self, uid: str) -> None:
        try:
            self._sessions.touch(uid, last_seen=now_utc())
        except Exception:
            # The active session may have been deleted by another device.
            logger.debug("lastSeen update skipped for %s", uid)
