from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..common.datetime_utils import to_datetime
from ..core.enums import Role
from ..firebase.firestore_base import as_str

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"

DEFAULT_REJECTION_REASON = "No reason provided"


@dataclass(frozen=True)
class RegistrationRequest:
    """Entity: registrationRequests/{id} document, submitted by a student."""

    request_id: str
    student_uid: str
    name: str
    roll_no: str
    email: str
    class_name: str = ""
    branch: str = ""
    phone: str = ""
    skills: str = ""
    team_no: str = ""
    photo_url: str = ""
    status: str = PENDING
    submitted_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == PENDING

    @classmethod
    def from_document(cls, request_id: str, data: Dict[str, Any]) -> "RegistrationRequest":
        return cls(
            request_id=request_id,
            student_uid=as_str(data.get("studentUid")),
            name=as_str(data.get("name")),
            roll_no=as_str(data.get("rollNo")),
            email=as_str(data.get("email")),
            class_name=as_str(data.get("class")),
            branch=as_str(data.get("branch")),
            phone=as_str(data.get("phone")),
            skills=as_str(data.get("skills")),
            team_no=as_str(data.get("teamNo")),
            photo_url=as_str(data.get("photoUrl")),
            status=as_str(data.get("status")) or PENDING,
            submitted_at=to_datetime(data.get("submittedAt")),
        )

    def to_user_document(self, approved_at: datetime) -> Dict[str, Any]:
        """users/{studentUid} document written on approval."""
        return {
            "uid": self.student_uid,
            "name": self.name,
            "rollNo": self.roll_no,
            "email": self.email,
            "class": self.class_name,
            "branch": self.branch,
            "phone": self.phone,
            "skills": self.skills,
            "teamNo": self.team_no,
            "photoUrl": self.photo_url,
            "role": Role.STUDENT.value,
            "status": APPROVED,
            "approvedAt": approved_at,
        }
