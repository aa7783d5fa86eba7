from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from ..auth.model import AuditLogEntry, UserRef
from ..auth.repository import AuditLogRepository
from ..common.datetime_utils import now_utc
from ..core.enums import LogAction
from ..core.exceptions import NotFoundError, ValidationError
from ..firebase.firestore_base import as_str
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import AttendanceDay
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def day_key(now: Optional[datetime] = None) -> str:
    """Document id for a day: the UTC date as YYYY-MM-DD."""
    return (now or now_utc()).date().isoformat()


class AttendanceService:
    """Use case: mark one day's attendance against the student roster."""

    def __init__(self, attendance: AttendanceRepository, students: StudentRepository, audit: AuditLogRepository):
        self._attendance = attendance
        self._students = students
        self._audit = audit

    def roster(self) -> List[Student]:
        return sorted((s for s in self._students.list_all() if s.roll_no), key=lambda s: s.roll_no)

    def get_day(self, day: Optional[str] = None) -> Optional[AttendanceDay]:
        return self._attendance.get(day or day_key())

    def match_scan(self, scanned: str) -> Student:
        """Find the student behind a scanned QR payload or a typed roll number."""
        text = as_str(scanned)
        if not text:
            raise ValidationError("Scan is empty")

        qr_id = ""
        roll_no = text
        if text.startswith("{"):
            try:
                payload = json.loads(text)
            except ValueError:
                raise ValidationError("Invalid QR code")
            qr_id = as_str(payload.get("qrId"))
            roll_no = as_str(payload.get("rollNo"))

        for student in self.roster():
            if (qr_id and student.qr_id == qr_id) or student.roll_no.lower() == roll_no.lower():
                return student
        raise NotFoundError(f"Student not found: {roll_no or qr_id}")

    def submit(
        self,
        present_roll_nos: Iterable[str],
        *,
        submitted_by: UserRef,
        day: Optional[str] = None,
    ) -> AttendanceDay:
        roster = [s.roll_no for s in self.roster()]
        if not roster:
            raise ValidationError("No students found")

        known = set(roster)
        present: List[str] = []
        for raw in present_roll_nos:
            roll_no = as_str(raw)
            if not roll_no or roll_no in present:
                continue
            if roll_no not in known:
                raise ValidationError(f"Unknown roll number: {roll_no}")
            present.append(roll_no)

        record = AttendanceDay(
            date=day or day_key(),
            present=tuple(present),
            absent=tuple(r for r in roster if r not in present),
            total_students=len(roster),
            submitted_by=submitted_by.name or "Admin",
            submitted_at=now_utc(),
        )

        try:
            self._attendance.save(record)
        except Exception as e:
            self._audit.write(
                AuditLogEntry(
                    action=LogAction.FIRESTORE_ERROR.value,
                    message=f"Saving attendance for {record.date} failed: {e}",
                    uid=submitted_by.uid,
                    email=submitted_by.email,
                    role=submitted_by.role.value,
                    page="/attendance",
                )
            )
            raise

        self._audit.write(
            AuditLogEntry(
                action=LogAction.ATTENDANCE_MARKED.value,
                message=f"Attendance for {record.date}: {record.present_count} present, {record.absent_count} absent",
                uid=submitted_by.uid,
                email=submitted_by.email,
                role=submitted_by.role.value,
                page="/attendance",
                metadata={"date": record.date, "present": record.present_count, "absent": record.absent_count},
            )
        )
        logger.info("Attendance submitted for %s by %s", record.date, submitted_by.email)
        return record
