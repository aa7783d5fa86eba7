from __future__ import annotations

from types import SimpleNamespace

import pytest
from firebase_admin import auth

from src.campus_admin.campus_admin.auth import firebase_identity
from src.campus_admin.campus_admin.auth.firebase_identity import FirebaseIdentityAdmin, FirebasePasswordSignIn
from src.campus_admin.campus_admin.core.exceptions import (
    AccountExistsError,
    AuthenticationError,
    NotFoundError,
    ValidationError,
    WeakPasswordError,
)


@pytest.fixture
def admin():
    return FirebaseIdentityAdmin(SimpleNamespace(app=object()))


def _raises(exc):
    def fn(*args, **kwargs):
        raise exc

    return fn


def test_get_user_by_email_maps_not_found(admin, monkeypatch):
    monkeypatch.setattr(firebase_identity.auth, "get_user_by_email", _raises(auth.UserNotFoundError("no user")))

    with pytest.raises(NotFoundError, match="^User not found$"):
        admin.get_user_by_email("ghost@school.edu")


def test_get_user_by_email_returns_account(admin, monkeypatch):
    record = SimpleNamespace(uid="u1", email="abhi@school.edu", display_name="Abhi")
    monkeypatch.setattr(firebase_identity.auth, "get_user_by_email", lambda email, app=None: record)

    account = admin.get_user_by_email("abhi@school.edu")

    assert (account.uid, account.email, account.display_name) == ("u1", "abhi@school.edu", "Abhi")


def test_update_password_maps_weak_password(admin, monkeypatch):
    monkeypatch.setattr(
        firebase_identity.auth,
        "update_user",
        _raises(ValueError("Invalid password string. Password must be a string at least 6 characters long.")),
    )

    with pytest.raises(WeakPasswordError, match="^Password is too weak$"):
        admin.update_password("u1", "x")


def test_update_password_maps_not_found(admin, monkeypatch):
    monkeypatch.setattr(firebase_identity.auth, "update_user", _raises(auth.UserNotFoundError("gone")))

    with pytest.raises(NotFoundError, match="^User not found$"):
        admin.update_password("u1", "newpass1")


def test_create_user_maps_existing_email(admin, monkeypatch):
    monkeypatch.setattr(
        firebase_identity.auth, "create_user", _raises(auth.EmailAlreadyExistsError("taken", None, None))
    )

    with pytest.raises(AccountExistsError, match="^Email already exists$"):
        admin.create_user(email="abhi@school.edu", password="pass1234", display_name="Abhi")


def test_create_user_maps_invalid_email(admin, monkeypatch):
    monkeypatch.setattr(firebase_identity.auth, "create_user", _raises(ValueError('Malformed email address string: "x".')))

    with pytest.raises(ValidationError, match="^Invalid email address$"):
        admin.create_user(email="x", password="pass1234", display_name="X")


def test_create_user_passes_flags(admin, monkeypatch):
    calls = []

    def create_user(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(uid="new-uid")

    monkeypatch.setattr(firebase_identity.auth, "create_user", create_user)

    uid = admin.create_user(email="a@b.c", password="pass1234", display_name="", email_verified=True)

    assert uid == "new-uid"
    assert calls[0]["display_name"] is None
    assert calls[0]["email_verified"] is True


def test_other_value_errors_keep_their_message(admin, monkeypatch):
    monkeypatch.setattr(firebase_identity.auth, "update_user", _raises(ValueError("Invalid uid")))

    with pytest.raises(ValidationError, match="^Invalid uid$") as info:
        admin.update_password("", "newpass1")
    assert not isinstance(info.value, WeakPasswordError)


@pytest.mark.parametrize(
    "exc",
    [auth.InvalidIdTokenError("bad token"), ValueError("Illegal ID token provided")],
)
def test_verify_id_token_maps_to_unauthorized(admin, monkeypatch, exc):
    monkeypatch.setattr(firebase_identity.auth, "verify_id_token", _raises(exc))

    with pytest.raises(AuthenticationError, match="^Unauthorized - Invalid token$"):
        admin.verify_id_token("nope")


def test_verify_id_token_returns_uid(admin, monkeypatch):
    monkeypatch.setattr(firebase_identity.auth, "verify_id_token", lambda token, app=None: {"uid": "admin-1"})

    assert admin.verify_id_token("good") == "admin-1"


class FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload
        self.text = str(payload)

    def json(self):
        return self._payload


class FakeHttp:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        return self.response


def test_password_sign_in_returns_local_id():
    http = FakeHttp(FakeResponse(200, {"localId": "u1", "idToken": "t"}))

    uid = FirebasePasswordSignIn("key-123", http=http).sign_in("a@b.c", "pw")

    assert uid == "u1"
    url, kwargs = http.calls[0]
    assert url.endswith("accounts:signInWithPassword")
    assert kwargs["params"] == {"key": "key-123"}
    assert kwargs["json"]["returnSecureToken"] is True


def test_password_sign_in_rejects_bad_credentials():
    http = FakeHttp(FakeResponse(400, {"error": {"message": "INVALID_PASSWORD"}}))

    with pytest.raises(AuthenticationError, match="Invalid email or password"):
        FirebasePasswordSignIn("key-123", http=http).sign_in("a@b.c", "wrong")


def test_password_sign_in_requires_api_key():
    with pytest.raises(AuthenticationError, match="FIREBASE_API_KEY"):
        FirebasePasswordSignIn("", http=FakeHttp(None)).sign_in("a@b.c", "pw")
