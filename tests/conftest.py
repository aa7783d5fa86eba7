from __future__ import annotations

import dataclasses
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from src.campus_admin.campus_admin.announcements.model import Announcement
from src.campus_admin.campus_admin.attendance.model import AttendanceDay
from src.campus_admin.campus_admin.auth.model import ActiveSession, AuditLogEntry, UserProfile
from src.campus_admin.campus_admin.auth.repository import IdentityAccount
from src.campus_admin.campus_admin.container import assemble
from src.campus_admin.campus_admin.core.enums import Role
from src.campus_admin.campus_admin.core.exceptions import (
    AccountExistsError,
    AuthenticationError,
    NotFoundError,
    WeakPasswordError,
)
from src.campus_admin.campus_admin.main import create_app
from src.campus_admin.campus_admin.registrations.model import APPROVED, REJECTED, RegistrationRequest
from src.campus_admin.campus_admin.students.model import Student, created_sort_key


class FakeClock:
    def __init__(self, start: int = 1_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FakeIdentity:
    """In-memory Firebase Auth: accounts keyed by email, id tokens map to uids."""

    def __init__(self):
        self.accounts: Dict[str, IdentityAccount] = {}
        self.passwords: Dict[str, str] = {}
        self.tokens: Dict[str, str] = {}
        self._next = 0

    def add(self, uid: str, email: str, password: str = "secret123", token: Optional[str] = None) -> None:
        self.accounts[email] = IdentityAccount(uid=uid, email=email)
        self.passwords[uid] = password
        if token:
            self.tokens[token] = uid

    def get_user_by_email(self, email: str) -> IdentityAccount:
        account = self.accounts.get(email)
        if account is None:
            raise NotFoundError("User not found")
        return account

    def update_password(self, uid: str, password: str) -> None:
        if len(password) < 6:
            raise WeakPasswordError("Password is too weak")
        self.passwords[uid] = password

    def create_user(self, *, email: str, password: str, display_name: str, email_verified: bool = False) -> str:
        if email in self.accounts:
            raise AccountExistsError("Email already exists")
        if len(password) < 6:
            raise WeakPasswordError("Password is too weak")
        self._next += 1
        uid = f"uid-{self._next}"
        self.add(uid, email, password)
        return uid

    def verify_id_token(self, id_token: str) -> str:
        uid = self.tokens.get(id_token)
        if uid is None:
            raise AuthenticationError("Unauthorized - Invalid token")
        return uid


class FakeSignIn:
    def __init__(self, identity: FakeIdentity):
        self._identity = identity

    def sign_in(self, email: str, password: str) -> str:
        account = self._identity.accounts.get(email)
        if account is None or self._identity.passwords.get(account.uid) != password:
            raise AuthenticationError("Invalid email or password")
        return account.uid


class InMemoryProfiles:
    def __init__(self):
        self.items: Dict[str, UserProfile] = {}

    def get(self, uid: str) -> Optional[UserProfile]:
        return self.items.get(uid)

    def save(self, profile: UserProfile) -> None:
        self.items[profile.uid] = profile


class InMemorySessions:
    def __init__(self):
        self.items: Dict[str, ActiveSession] = {}
        self.touched: List[str] = []

    def upsert(self, active: ActiveSession) -> None:
        self.items[active.uid] = active

    def touch(self, uid: str, *, last_seen: datetime) -> None:
        self.touched.append(uid)

    def delete(self, uid: str) -> None:
        self.items.pop(uid, None)


class InMemoryAudit:
    def __init__(self):
        self.entries: List[AuditLogEntry] = []

    def write(self, entry: AuditLogEntry) -> None:
        self.entries.append(entry)

    @property
    def actions(self) -> List[str]:
        return [e.action for e in self.entries]


class InMemoryStudents:
    """Stores raw documents, like Firestore, so untouched fields are visible."""

    def __init__(self):
        self.docs: Dict[str, Dict[str, Any]] = {}

    def list_all(self):
        items = [Student.from_document(doc_id, doc) for doc_id, doc in self.docs.items()]
        return sorted(items, key=created_sort_key, reverse=True)

    def get(self, doc_id: str) -> Optional[Student]:
        doc = self.docs.get(doc_id)
        return Student.from_document(doc_id, doc) if doc is not None else None

    def save(self, student: Student) -> None:
        self.docs.setdefault(student.doc_id, {}).update(student.to_document())

    def link_uid(self, doc_id: str, uid: str) -> None:
        self.docs[doc_id].update({"uid": uid, "updatedAt": datetime.now(timezone.utc)})

    def count(self) -> int:
        return len(self.docs)


class InMemoryAnnouncements:
    def __init__(self):
        self.items: Dict[str, Announcement] = {}
        self._next = 0

    def list_recent(self):
        return sorted(self.items.values(), key=lambda a: a.timestamp, reverse=True)

    def add(self, announcement: Announcement) -> str:
        self._next += 1
        new_id = f"a{self._next}"
        self.items[new_id] = Announcement(
            announcement_id=new_id,
            title=announcement.title,
            message=announcement.message,
            timestamp=announcement.timestamp,
            created_by=announcement.created_by,
        )
        return new_id

    def delete(self, announcement_id: str) -> None:
        self.items.pop(announcement_id, None)


class InMemoryAttendance:
    def __init__(self):
        self.items: Dict[str, AttendanceDay] = {}

    def get(self, day: str) -> Optional[AttendanceDay]:
        return self.items.get(day)

    def save(self, record: AttendanceDay) -> None:
        self.items[record.date] = record


def _submitted_key(request: RegistrationRequest) -> float:
    return request.submitted_at.timestamp() if request.submitted_at else 0.0


class InMemoryRegistrations:
    def __init__(self):
        self.items: Dict[str, RegistrationRequest] = {}
        self.users: Dict[str, Dict[str, Any]] = {}
        self.reasons: Dict[str, str] = {}

    def add(self, request: RegistrationRequest) -> None:
        self.items[request.request_id] = request

    def list_pending(self):
        pending = [r for r in self.items.values() if r.is_pending]
        return sorted(pending, key=_submitted_key, reverse=True)

    def get(self, request_id: str) -> Optional[RegistrationRequest]:
        return self.items.get(request_id)

    def approve(self, request: RegistrationRequest, *, approved_at: datetime) -> None:
        self.users[request.student_uid] = request.to_user_document(approved_at)
        self.items[request.request_id] = dataclasses.replace(request, status=APPROVED)

    def reject(self, request_id: str, *, reason: str, rejected_at: datetime) -> None:
        self.reasons[request_id] = reason
        self.items[request_id] = dataclasses.replace(self.items[request_id], status=REJECTED)


class InMemoryMessages:
    def __init__(self):
        self.sent: List[Dict[str, str]] = []

    def send(self, student_uid: str, *, title: str, message: str, kind: str) -> None:
        self.sent.append({"uid": student_uid, "title": title, "message": message, "type": kind})


ADMIN = UserProfile(uid="admin-1", email="admin@school.edu", name="Admin", role=Role.ADMIN)
STUDENT = UserProfile(uid="stu-1", email="abhi@school.edu", name="Abhi", role=Role.STUDENT, roll_no="23B21A4565")


@pytest.fixture
def identity():
    ident = FakeIdentity()
    ident.add(ADMIN.uid, ADMIN.email, "admin-pass", token="admin-token")
    ident.add(STUDENT.uid, STUDENT.email, "student-pass", token="student-token")
    return ident


@pytest.fixture
def profiles():
    repo = InMemoryProfiles()
    repo.save(ADMIN)
    repo.save(STUDENT)
    return repo


@pytest.fixture
def sessions():
    return InMemorySessions()


@pytest.fixture
def audit():
    return InMemoryAudit()


@pytest.fixture
def students():
    return InMemoryStudents()


@pytest.fixture
def announcements():
    return InMemoryAnnouncements()


@pytest.fixture
def attendance():
    return InMemoryAttendance()


@pytest.fixture
def registrations():
    return InMemoryRegistrations()


@pytest.fixture
def messages():
    return InMemoryMessages()


@pytest.fixture
def container(identity, profiles, sessions, audit, students, announcements, attendance, registrations, messages):
    return assemble(
        identity=identity,
        password_sign_in=FakeSignIn(identity),
        profiles_repo=profiles,
        sessions_repo=sessions,
        audit_repo=audit,
        students_repo=students,
        announcements_repo=announcements,
        attendance_repo=attendance,
        registrations_repo=registrations,
        messages_repo=messages,
    )


@pytest.fixture
def app(container):
    return create_app(container=container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_profile():
    return ADMIN


@pytest.fixture
def student_profile():
    return STUDENT


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def login(client):
    def _login(profile: UserProfile) -> None:
        with client.session_transaction() as sess:
            sess["uid"] = profile.uid

    return _login
