from __future__ import annotations

from datetime import datetime, timezone

import pytest

from src.campus_admin.campus_admin.core.enums import LogAction
from src.campus_admin.campus_admin.core.exceptions import NotFoundError, ValidationError
from src.campus_admin.campus_admin.registrations.model import RegistrationRequest
from src.campus_admin.campus_admin.registrations.service import RegistrationService


def _request(request_id: str, uid: str, name: str, day: int, **kw) -> RegistrationRequest:
    return RegistrationRequest(
        request_id=request_id,
        student_uid=uid,
        name=name,
        roll_no=f"23B{day}",
        email=f"{uid}@school.edu",
        submitted_at=datetime(2024, 3, day, tzinfo=timezone.utc),
        **kw,
    )


@pytest.fixture
def pending(registrations):
    registrations.add(_request("r1", "u1", "Abhi", 1, branch="CSE", team_no="4"))
    registrations.add(_request("r2", "u2", "Ravi", 2))
    registrations.add(_request("r3", "u3", "Old", 3, status="approved"))
    return registrations


def test_list_pending_newest_first(container, pending):
    assert [r.request_id for r in container.registration_service.list_pending()] == ["r2", "r1"]


def test_approve_creates_student_profile_and_message(container, pending, messages, audit, admin_profile):
    approved = container.registration_service.approve("r1", reviewer=admin_profile.to_user_ref())

    assert approved.name == "Abhi"
    user = pending.users["u1"]
    assert user["role"] == "student"
    assert user["status"] == "approved"
    assert user["branch"] == "CSE"
    assert user["teamNo"] == "4"
    assert "password" not in user
    assert pending.get("r1").status == "approved"
    assert messages.sent == [
        {
            "uid": "u1",
            "title": "Registration Approved",
            "message": "Your registration has been approved. You can now use the app.",
            "type": "approval",
        }
    ]
    assert audit.actions == [LogAction.REGISTRATION_APPROVED.value]


def test_reject_with_and_without_reason(container, pending, messages, audit, admin_profile):
    svc = container.registration_service
    svc.reject("r1", reviewer=admin_profile.to_user_ref(), reason="Wrong roll number")
    svc.reject("r2", reviewer=admin_profile.to_user_ref())

    assert pending.reasons == {"r1": "Wrong roll number", "r2": "No reason provided"}
    assert [m["message"] for m in messages.sent] == [
        "Wrong roll number",
        "Your registration was rejected. Please contact the admin.",
    ]
    assert {m["type"] for m in messages.sent} == {"rejection"}
    assert audit.actions == [LogAction.REGISTRATION_REJECTED.value] * 2
    assert container.registration_service.list_pending() == []


def test_review_requires_pending_request(container, pending, admin_profile):
    svc = container.registration_service

    with pytest.raises(NotFoundError, match="Registration request not found"):
        svc.approve("missing", reviewer=admin_profile.to_user_ref())
    with pytest.raises(ValidationError, match="already approved"):
        svc.reject("r3", reviewer=admin_profile.to_user_ref())


def test_message_failure_does_not_undo_approval(pending, audit, admin_profile):
    class BrokenMessages:
        def send(self, student_uid, *, title, message, kind):
            raise RuntimeError("unavailable")

    svc = RegistrationService(pending, BrokenMessages(), audit)
    svc.approve("r2", reviewer=admin_profile.to_user_ref())

    assert pending.get("r2").status == "approved"
    assert audit.actions == [LogAction.REGISTRATION_APPROVED.value]


def test_from_document_reads_firestore_keys():
    req = RegistrationRequest.from_document(
        "r9",
        {"studentUid": "u9", "name": "Kiran", "rollNo": "23B9", "class": "III", "photoUrl": "p.png", "status": "pending"},
    )

    assert (req.student_uid, req.class_name, req.photo_url, req.is_pending) == ("u9", "III", "p.png", True)
