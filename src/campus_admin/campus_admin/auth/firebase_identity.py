from __future__ import annotations

import logging
from typing import Optional

import requests
from firebase_admin import auth
from firebase_admin.exceptions import FirebaseError

from ..core.exceptions import (
    AccountExistsError,
    AuthenticationError,
    NotFoundError,
    ValidationError,
    WeakPasswordError,
)
from ..firebase.connection import FirebaseConnection
from .repository import IdentityAccount, IdentityAdmin, PasswordSignIn

logger = logging.getLogger(__name__)


def _translate_value_error(exc: ValueError) -> Exception:
    # firebase_admin validates arguments locally and raises ValueError.
    message = str(exc)
    lowered = message.lower()
    if "password" in lowered:
        return WeakPasswordError("Password is too weak")
    if "email" in lowered:
        return ValidationError("Invalid email address")
    return ValidationError(message)


class FirebaseIdentityAdmin(IdentityAdmin):
    def __init__(self, conn: FirebaseConnection):
        self._conn = conn

    def get_user_by_email(self, email: str) -> IdentityAccount:
        try:
            record = auth.get_user_by_email(email, app=self._conn.app)
        except auth.UserNotFoundError as e:
            raise NotFoundError("User not found") from e
        except ValueError as e:
            raise _translate_value_error(e) from e
        return IdentityAccount(uid=record.uid, email=record.email or email, display_name=record.display_name)

    def update_password(self, uid: str, password: str) -> None:
        try:
            auth.update_user(uid, password=password, app=self._conn.app)
        except auth.UserNotFoundError as e:
            raise NotFoundError("User not found") from e
        except ValueError as e:
            raise _translate_value_error(e) from e

    def create_user(self, *, email: str, password: str, display_name: str, email_verified: bool = False) -> str:
        try:
            record = auth.create_user(
                email=email,
                password=password,
                display_name=display_name or None,
                email_verified=email_verified,
                app=self._conn.app,
            )
        except auth.EmailAlreadyExistsError as e:
            raise AccountExistsError("Email already exists") from e
        except ValueError as e:
            raise _translate_value_error(e) from e
        return record.uid

    def verify_id_token(self, id_token: str) -> str:
        try:
            decoded = auth.verify_id_token(id_token, app=self._conn.app)
        except (auth.InvalidIdTokenError, auth.UserDisabledError, ValueError) as e:
            raise AuthenticationError("Unauthorized - Invalid token") from e
        except FirebaseError as e:
            logger.warning("ID token verification failed: %s", e)
            raise AuthenticationError("Unauthorized - Invalid token") from e
        return decoded["uid"]


class FirebasePasswordSignIn(PasswordSignIn):
    """Email/password sign-in through the Identity Toolkit REST API.

    The Admin SDK cannot check passwords, so this calls the same endpoint the
    Firebase client SDKs use.
    """

    ENDPOINT = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"

    def __init__(self, api_key: str, *, http: Optional[requests.Session] = None, timeout: float = 10.0):
        self._api_key = api_key
        self._http = http or requests.Session()
        self._timeout = timeout

    def sign_in(self, email: str, password: str) -> str:
        if not self._api_key:
            raise AuthenticationError("Password sign-in is not configured (FIREBASE_API_KEY)")

        r = self._http.post(
            self.ENDPOINT,
            params={"key": self._api_key},
            json={"email": email, "password": password, "returnSecureToken": True},
            timeout=self._timeout,
        )
        if r.status_code != 200:
            try:
                reason = r.json().get("error", {}).get("message", "")
            except ValueError:
                reason = r.text
            logger.info("Sign-in rejected for %s: %s", email, reason)
            raise AuthenticationError("Invalid email or password")

        return r.json()["localId"]
