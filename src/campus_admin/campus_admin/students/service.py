from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..auth.model import AuditLogEntry, UserProfile, UserRef
from ..auth.repository import AuditLogRepository, IdentityAdmin, UserProfileRepository
from ..common.datetime_utils import now_utc
from ..common.validators import normalize_email
from ..core.constants import FALLBACK_EMAIL_DOMAIN
from ..core.enums import LogAction, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError, ValidationError
from ..firebase.firestore_base import as_str
from .csv_utils import generate_random_password
from .model import BulkUploadReport, Student, UploadResult
from .repository import StudentRepository

logger = logging.getLogger(__name__)


def _pick(row: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = as_str(row.get(key))
        if value:
            return value
    return ""


class StudentAccountService:
    """Use cases behind the admin API: password reset, single and bulk
    student creation."""

    def __init__(
        self,
        identity: IdentityAdmin,
        profiles: UserProfileRepository,
        students: StudentRepository,
        audit: AuditLogRepository,
        *,
        password_factory: Callable[[], str] = generate_random_password,
    ):
        self._identity = identity
        self._profiles = profiles
        self._students = students
        self._audit = audit
        self._password_factory = password_factory

    def require_admin(self, authorization: Optional[str]) -> UserRef:
        """Check a ``Bearer <id token>`` header belongs to an admin."""
        if not authorization or not authorization.startswith("Bearer "):
            raise AuthenticationError("Unauthorized - Missing or invalid token")

        uid = self._identity.verify_id_token(authorization[len("Bearer "):].strip())
        profile = self._profiles.get(uid)
        if profile is None or profile.role != Role.ADMIN:
            self._audit.write(
                AuditLogEntry(
                    action=LogAction.PERMISSION_DENIED.value,
                    message="Admin API called without admin role",
                    uid=uid,
                    email=profile.email if profile else "unknown",
                    role=profile.role.value if profile else "unknown",
                )
            )
            raise AuthorizationError("Forbidden - Admin access required")
        return profile.to_user_ref()

    def reset_password(self, email: str, new_password: str) -> str:
        if not email or not new_password:
            raise ValidationError("Missing email or password")

        account = self._identity.get_user_by_email(email)
        self._identity.update_password(account.uid, new_password)
        logger.info("Password reset for %s", email)
        return f"Password reset for {email}"

    def _create_records(self, *, name: str, roll_no: str, email: str, password: str, extra: Mapping[str, Any]) -> str:
        uid = self._identity.create_user(email=email, password=password, display_name=name)
        now = now_utc()
        self._profiles.save(
            UserProfile(uid=uid, email=email, name=name, role=Role.STUDENT, roll_no=roll_no, created_at=now)
        )
        self._students.save(
            Student(
                doc_id=uid,
                uid=uid,
                name=name,
                roll_no=roll_no,
                email=email,
                year=_pick(extra, "year"),
                branch=_pick(extra, "branch"),
                phone_no=_pick(extra, "phoneNo", "phoneno"),
                linkedin=_pick(extra, "linkedin"),
                github=_pick(extra, "github"),
                created_at=now,
                updated_at=now,
            )
        )
        return uid

    def create_student(self, payload: Mapping[str, Any], *, created_by: Optional[UserRef] = None) -> Dict[str, Any]:
        email = normalize_email(as_str(payload.get("email")))
        password = str(payload.get("password") or "")
        name = as_str(payload.get("name"))
        roll_no = as_str(payload.get("rollNo"))
        if not email or not password or not name or not roll_no:
            raise ValidationError("Missing required fields: email, password, name, rollNo")

        uid = self._create_records(name=name, roll_no=roll_no, email=email, password=password, extra=payload)
        self._audit.write(
            AuditLogEntry(
                action=LogAction.STUDENT_CREATED.value,
                message=f"Student {roll_no} created",
                uid=created_by.uid if created_by else "anonymous",
                email=created_by.email if created_by else "unknown",
                role=Role.ADMIN.value if created_by else "unknown",
                metadata={"studentUid": uid, "rollNo": roll_no},
            )
        )
        return {
            "success": True,
            "uid": uid,
            "email": email,
            "name": name,
            "rollNo": roll_no,
            "message": "Student created successfully",
        }

    def bulk_upload(self, rows: List[Mapping[str, Any]], *, created_by: Optional[UserRef] = None) -> BulkUploadReport:
        if not isinstance(rows, list) or not rows:
            raise ValidationError("No student data provided")

        actor = {
            "uid": created_by.uid if created_by else "anonymous",
            "email": created_by.email if created_by else "unknown",
            "role": Role.ADMIN.value if created_by else "unknown",
        }
        self._audit.write(
            AuditLogEntry(action=LogAction.CSV_UPLOAD_START.value, message=f"Uploading {len(rows)} students", **actor)
        )

        report = BulkUploadReport()
        for i, row in enumerate(rows, start=1):
            name = _pick(row, "name")
            roll_no = _pick(row, "rollno", "rollNo")
            if not name:
                report.results.append(UploadResult(success=False, row_index=i, error="Name is required"))
                continue
            if not roll_no:
                report.results.append(
                    UploadResult(success=False, row_index=i, name=name, error="Roll number is required")
                )
                continue

            email = normalize_email(_pick(row, "email")) or f"student{roll_no}@{FALLBACK_EMAIL_DOMAIN}"
            password = self._password_factory()
            try:
                uid = self._create_records(name=name, roll_no=roll_no, email=email, password=password, extra=row)
            except DomainError as e:
                report.results.append(
                    UploadResult(success=False, row_index=i, roll_no=roll_no, name=name, error=str(e))
                )
                continue
            except Exception as e:
                logger.exception("Bulk upload row %s failed", i)
                report.results.append(
                    UploadResult(success=False, row_index=i, roll_no=roll_no, name=name, error=str(e) or "Unknown error")
                )
                continue

            report.results.append(
                UploadResult(
                    success=True,
                    row_index=i,
                    roll_no=roll_no,
                    name=name,
                    email=email,
                    uid=uid,
                    password=password,
                )
            )

        action = LogAction.CSV_UPLOAD_SUCCESS if report.successful else LogAction.CSV_UPLOAD_FAILED
        self._audit.write(
            AuditLogEntry(
                action=action.value,
                message=f"{report.successful} created, {report.failed} failed",
                metadata={"total": report.total_processed, "successful": report.successful, "failed": report.failed},
                **actor,
            )
        )
        return report

    def list_students(self):
        return self._students.list_all()
