from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.constants import STUDENTS_COLLECTION
from ..firebase.connection import FirebaseConnection
from ..firebase.firestore_base import snapshot_to_dict, stream_to_dicts
from .model import Student, created_sort_key
from .repository import StudentRepository


class FirestoreStudentRepository(StudentRepository):
    def __init__(self, conn: FirebaseConnection):
        self._conn = conn

    def _collection(self):
        return self._conn.firestore().collection(STUDENTS_COLLECTION)

    def list_all(self) -> Sequence[Student]:
        rows = stream_to_dicts(self._collection().stream())
        students = [Student.from_document(r["id"], r) for r in rows]
        students.sort(key=created_sort_key, reverse=True)
        return students

    def get(self, doc_id: str) -> Optional[Student]:
        row = snapshot_to_dict(self._collection().document(doc_id).get())
        if not row:
            return None
        return Student.from_document(doc_id, row)

    def save(self, student: Student) -> None:
        doc = student.to_document()
        now = now_utc()
        if doc.get("createdAt") is None:
            doc["createdAt"] = now
        if doc.get("updatedAt") is None:
            doc["updatedAt"] = now
        self._collection().document(student.doc_id).set(doc, merge=True)

    def link_uid(self, doc_id: str, uid: str) -> None:
        self._collection().document(doc_id).update({"uid": uid, "updatedAt": now_utc()})

    def count(self) -> int:
        return sum(1 for _ in self._collection().select([]).stream())
