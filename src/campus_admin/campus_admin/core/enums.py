from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role stored on the users/{uid} profile document."""

    ADMIN = "admin"
    STUDENT = "student"
    USER = "user"

    @classmethod
    def parse(cls, value: object) -> "Role":
        try:
            return cls(str(value or cls.USER.value))
        except ValueError:
            return cls.USER


class ToastKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class LogAction(str, Enum):
    """Audit actions written to the logs collection."""

    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    LOGOUT = "LOGOUT"
    CSV_UPLOAD_START = "CSV_UPLOAD_START"
    CSV_UPLOAD_SUCCESS = "CSV_UPLOAD_SUCCESS"
    CSV_UPLOAD_FAILED = "CSV_UPLOAD_FAILED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    FIRESTORE_ERROR = "FIRESTORE_ERROR"
    ATTENDANCE_MARKED = "ATTENDANCE_MARKED"
    STUDENT_CREATED = "STUDENT_CREATED"
    PROFILE_VIEWED = "PROFILE_VIEWED"
    REGISTRATION_APPROVED = "REGISTRATION_APPROVED"
    REGISTRATION_REJECTED = "REGISTRATION_REJECTED"
