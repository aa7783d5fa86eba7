from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Union

from ..common.datetime_utils import to_datetime
from ..core.enums import Role


@dataclass(frozen=True)
class UserRef:
    """Signed-in identity as seen by pages and the admin guard."""

    uid: str
    email: str
    name: str
    role: Role
    login_time: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT


@dataclass(frozen=True)
class UserProfile:
    """Entity: users/{uid} document."""

    uid: str
    email: str
    name: str
    role: Role
    roll_no: Optional[str] = None
    created_at: Optional[datetime] = None
    login_time: Optional[datetime] = None

    @classmethod
    def from_document(cls, uid: str, data: Dict[str, Any]) -> "UserProfile":
        return cls(
            uid=uid,
            email=str(data.get("email") or ""),
            name=str(data.get("name") or "User"),
            role=Role.parse(data.get("role")),
            roll_no=data.get("rollNo"),
            created_at=to_datetime(data.get("createdAt")),
            login_time=to_datetime(data.get("loginTime")),
        )

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "uid": self.uid,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "createdAt": self.created_at,
        }
        if self.roll_no:
            doc["rollNo"] = self.roll_no
        return doc

    def to_user_ref(self, *, login_time: Optional[datetime] = None) -> UserRef:
        return UserRef(
            uid=self.uid,
            email=self.email,
            name=self.name,
            role=self.role,
            login_time=login_time or self.login_time,
        )


@dataclass(frozen=True)
class ActiveSession:
    """Entity: activeSessions/{uid} document."""

    uid: str
    email: str
    role: Role
    name: str
    login_at: datetime
    last_seen: datetime
    user_agent: str = "unknown"
    platform: str = "unknown"


@dataclass(frozen=True)
class AuditLogEntry:
    """Entity: logs/* document."""

    action: str
    message: str
    uid: str = "anonymous"
    email: str = "unknown"
    role: str = "unknown"
    page: str = "unknown"
    metadata: Dict[str, Any] = field(default_factory=dict)


# Session identity: a tagged union of three variants.


@dataclass(frozen=True)
class Loading:
    """Identity state not yet known."""


@dataclass(frozen=True)
class Unauthenticated:
    """No signed-in user."""


@dataclass(frozen=True)
class Authenticated:
    user: UserRef

    @property
    def is_admin(self) -> bool:
        return self.user.is_admin


SessionState = Union[Loading, Unauthenticated, Authenticated]

LOADING = Loading()
UNAUTHENTICATED = Unauthenticated()
