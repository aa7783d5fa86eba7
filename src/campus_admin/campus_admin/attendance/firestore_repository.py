from __future__ import annotations

from typing import Optional

from ..core.constants import ATTENDANCE_COLLECTION
from ..firebase.connection import FirebaseConnection
from ..firebase.firestore_base import snapshot_to_dict
from .model import AttendanceDay
from .repository import AttendanceRepository


class FirestoreAttendanceRepository(AttendanceRepository):
    def __init__(self, conn: FirebaseConnection):
        self._conn = conn

    def _doc(self, day: str):
        return self._conn.firestore().collection(ATTENDANCE_COLLECTION).document(day)

    def get(self, day: str) -> Optional[AttendanceDay]:
        row = snapshot_to_dict(self._doc(day).get())
        if not row:
            return None
        return AttendanceDay.from_document(day, row)

    def save(self, record: AttendanceDay) -> None:
        self._doc(record.date).set(record.to_document())
