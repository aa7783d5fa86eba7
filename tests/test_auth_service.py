from __future__ import annotations

import pytest

from src.campus_admin.campus_admin.auth.model import UNAUTHENTICATED, Authenticated
from src.campus_admin.campus_admin.core.enums import LogAction, Role
from src.campus_admin.campus_admin.core.exceptions import AuthenticationError, ValidationError


def test_sign_in_opens_session_and_logs(container, sessions, audit):
    user = container.auth_service.sign_in(" Admin@School.edu ", "admin-pass", platform="Linux")

    assert user.uid == "admin-1"
    assert user.role == Role.ADMIN
    assert user.login_time is not None
    assert sessions.items["admin-1"].platform == "Linux"
    assert audit.actions == [LogAction.LOGIN_SUCCESS.value]


def test_sign_in_wrong_password_raises(container, sessions):
    with pytest.raises(AuthenticationError):
        container.auth_service.sign_in("admin@school.edu", "wrong")
    assert sessions.items == {}


def test_sign_in_requires_both_fields(container):
    with pytest.raises(ValidationError, match="Email is required"):
        container.auth_service.sign_in("", "x")
    with pytest.raises(ValidationError, match="Password is required"):
        container.auth_service.sign_in("admin@school.edu", "")


def test_sign_in_without_profile_fails(container, identity, audit):
    identity.add("ghost", "ghost@school.edu", "ghost-pass")

    with pytest.raises(AuthenticationError, match="User profile missing"):
        container.auth_service.sign_in("ghost@school.edu", "ghost-pass")
    assert audit.actions == [LogAction.LOGIN_FAILED.value]


def test_sign_out_clears_session(container, sessions, audit):
    user = container.auth_service.sign_in("abhi@school.edu", "student-pass")

    container.auth_service.sign_out(user)

    assert "stu-1" not in sessions.items
    assert audit.actions[-1] == LogAction.LOGOUT.value


def test_sign_out_without_user_is_noop(container, audit):
    container.auth_service.sign_out(None)
    assert audit.entries == []


def test_resolve(container):
    assert container.auth_service.resolve(None) == UNAUTHENTICATED
    assert container.auth_service.resolve("missing") == UNAUTHENTICATED

    state = container.auth_service.resolve("admin-1")
    assert isinstance(state, Authenticated)
    assert state.is_admin


def test_resolve_lookup_failure_is_unauthenticated(container, profiles, monkeypatch):
    def boom(uid):
        raise RuntimeError("firestore down")

    monkeypatch.setattr(profiles, "get", boom)
    assert container.auth_service.resolve("admin-1") == UNAUTHENTICATED
