from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .announcements.firestore_repository import FirestoreAnnouncementRepository
from .announcements.repository import AnnouncementRepository
from .announcements.service import AnnouncementService
from .attendance.firestore_repository import FirestoreAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.firebase_identity import FirebaseIdentityAdmin, FirebasePasswordSignIn
from .auth.firestore_repository import (
    FirestoreActiveSessionRepository,
    FirestoreAuditLogRepository,
    FirestoreUserProfileRepository,
)
from .auth.repository import (
    ActiveSessionRepository,
    AuditLogRepository,
    IdentityAdmin,
    PasswordSignIn,
    UserProfileRepository,
)
from .auth.service import AuthService
from .firebase.connection import FirebaseConfig, FirebaseConnection
from .registrations.firestore_repository import (
    FirestoreRegistrationRepository,
    FirestoreSystemMessageRepository,
)
from .registrations.repository import RegistrationRepository, SystemMessageRepository
from .registrations.service import RegistrationService
from .students.firestore_repository import FirestoreStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentAccountService


@dataclass(frozen=True)
class Container:
    identity: IdentityAdmin
    password_sign_in: PasswordSignIn

    profiles_repo: UserProfileRepository
    sessions_repo: ActiveSessionRepository
    audit_repo: AuditLogRepository
    students_repo: StudentRepository
    announcements_repo: AnnouncementRepository
    attendance_repo: AttendanceRepository
    registrations_repo: RegistrationRepository
    messages_repo: SystemMessageRepository

    auth_service: AuthService
    student_service: StudentAccountService
    announcement_service: AnnouncementService
    attendance_service: AttendanceService
    registration_service: RegistrationService


def assemble(
    *,
    identity: IdentityAdmin,
    password_sign_in: PasswordSignIn,
    profiles_repo: UserProfileRepository,
    sessions_repo: ActiveSessionRepository,
    audit_repo: AuditLogRepository,
    students_repo: StudentRepository,
    announcements_repo: AnnouncementRepository,
    attendance_repo: AttendanceRepository,
    registrations_repo: RegistrationRepository,
    messages_repo: SystemMessageRepository,
) -> Container:
    """Wire services over the given adapters (Firestore in production,
    in-memory fakes in tests)."""
    return Container(
        identity=identity,
        password_sign_in=password_sign_in,
        profiles_repo=profiles_repo,
        sessions_repo=sessions_repo,
        audit_repo=audit_repo,
        students_repo=students_repo,
        announcements_repo=announcements_repo,
        attendance_repo=attendance_repo,
        registrations_repo=registrations_repo,
        messages_repo=messages_repo,
        auth_service=AuthService(password_sign_in, profiles_repo, sessions_repo, audit_repo),
        student_service=StudentAccountService(identity, profiles_repo, students_repo, audit_repo),
        announcement_service=AnnouncementService(announcements_repo),
        attendance_service=AttendanceService(attendance_repo, students_repo, audit_repo),
        registration_service=RegistrationService(registrations_repo, messages_repo, audit_repo),
    )


def build_container(*, firebase_config: dict, api_key: Optional[str] = None) -> Container:
    config = FirebaseConfig(
        credentials_path=str(firebase_config.get("credentials_path") or "serviceAccountKey.json"),
        project_id=firebase_config.get("project_id") or None,
        credentials_json=firebase_config.get("credentials_json") or None,
    )
    conn = FirebaseConnection.get_instance(config)

    return assemble(
        identity=FirebaseIdentityAdmin(conn),
        password_sign_in=FirebasePasswordSignIn(api_key or ""),
        profiles_repo=FirestoreUserProfileRepository(conn),
        sessions_repo=FirestoreActiveSessionRepository(conn),
        audit_repo=FirestoreAuditLogRepository(conn),
        students_repo=FirestoreStudentRepository(conn),
        announcements_repo=FirestoreAnnouncementRepository(conn),
        attendance_repo=FirestoreAttendanceRepository(conn),
        registrations_repo=FirestoreRegistrationRepository(conn),
        messages_repo=FirestoreSystemMessageRepository(conn),
    )
