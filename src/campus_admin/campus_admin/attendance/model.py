from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from ..common.datetime_utils import to_datetime
from ..firebase.firestore_base import as_str


@dataclass(frozen=True)
class AttendanceDay:
    """Entity: attendance/{YYYY-MM-DD} document.

    ``absent`` is the roster minus ``present``, computed at submission time.
    """

    date: str
    present: Tuple[str, ...]
    absent: Tuple[str, ...]
    total_students: int
    submitted_by: str = "Admin"
    submitted_at: Optional[datetime] = None

    @property
    def present_count(self) -> int:
        return len(self.present)

    @property
    def absent_count(self) -> int:
        return len(self.absent)

    @classmethod
    def from_document(cls, day: str, data: Dict[str, Any]) -> "AttendanceDay":
        present = tuple(as_str(r) for r in data.get("presentStudents") or ())
        absent = tuple(as_str(r) for r in data.get("absentStudents") or ())
        return cls(
            date=as_str(data.get("date")) or day,
            present=present,
            absent=absent,
            total_students=int(data.get("totalStudents") or len(present) + len(absent)),
            submitted_by=as_str(data.get("submittedBy")) or "Admin",
            submitted_at=to_datetime(data.get("submittedAt")),
        )

    def to_document(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "presentStudents": list(self.present),
            "absentStudents": list(self.absent),
            "presentCount": self.present_count,
            "absentCount": self.absent_count,
            "totalStudents": self.total_students,
            "submittedAt": self.submitted_at,
            "submittedBy": self.submitted_by,
        }
