from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..common.datetime_utils import to_datetime
from ..firebase.firestore_base import as_str


@dataclass(frozen=True)
class Student:
    """Entity: students/* document.

    Note: no password material is kept on the document.
    """

    doc_id: str
    name: str
    roll_no: str
    email: str = ""
    year: str = ""
    branch: str = ""
    backlogs: str = "0"
    phone_no: str = ""
    linkedin: str = ""
    github: str = ""
    username: str = ""
    qr_id: str = ""
    uid: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Student":
        return cls(
            doc_id=doc_id,
            name=as_str(data.get("name")),
            roll_no=as_str(data.get("rollNo")),
            email=as_str(data.get("email")),
            year=as_str(data.get("year")),
            branch=as_str(data.get("branch")),
            backlogs=as_str(data.get("backlogs")) or "0",
            phone_no=as_str(data.get("phoneNo")),
            linkedin=as_str(data.get("linkedin")),
            github=as_str(data.get("github")),
            username=as_str(data.get("username")),
            qr_id=as_str(data.get("qrId")),
            uid=data.get("uid"),
            created_at=to_datetime(data.get("createdAt")),
            updated_at=to_datetime(data.get("updatedAt")),
        )

    def to_document(self) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "name": self.name,
            "rollNo": self.roll_no,
            "email": self.email,
            "year": self.year,
            "branch": self.branch,
            "backlogs": self.backlogs,
            "phoneNo": self.phone_no,
            "linkedin": self.linkedin,
            "github": self.github,
            "username": self.username,
            "qrId": self.qr_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.uid:
            doc["uid"] = self.uid
        return doc


@dataclass(frozen=True)
class UploadResult:
    """Outcome of one CSV row / one account creation."""

    success: bool
    row_index: Optional[int] = None
    roll_no: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    uid: Optional[str] = None
    # Shown to the operator once; never stored.
    password: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success}
        for key, value in (
            ("rowIndex", self.row_index),
            ("rollNo", self.roll_no),
            ("name", self.name),
            ("email", self.email),
            ("uid", self.uid),
            ("password", self.password),
            ("error", self.error),
        ):
            if value is not None:
                out[key] = value
        return out


@dataclass
class BulkUploadReport:
    results: List[UploadResult] = field(default_factory=list)

    @property
    def total_processed(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "totalProcessed": self.total_processed,
            "successful": self.successful,
            "failed": self.failed,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass
class MigrationTally:
    created: int = 0
    skipped: int = 0
    errors: int = 0
    credentials: List[Dict[str, str]] = field(default_factory=list)


def created_sort_key(student: Student) -> float:
    # Documents without createdAt sort last.
    return student.created_at.timestamp() if student.created_at else 0.0
