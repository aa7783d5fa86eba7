from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from firebase_admin import firestore

from ..common.datetime_utils import now_utc
from ..core.constants import MESSAGES_SUBCOLLECTION, REGISTRATION_REQUESTS_COLLECTION, USERS_COLLECTION
from ..firebase.connection import FirebaseConnection
from ..firebase.firestore_base import snapshot_to_dict, stream_to_dicts
from .model import APPROVED, PENDING, REJECTED, RegistrationRequest
from .repository import RegistrationRepository, SystemMessageRepository


class FirestoreRegistrationRepository(RegistrationRepository):
    def __init__(self, conn: FirebaseConnection):
        self._conn = conn

    def _collection(self):
        return self._conn.firestore().collection(REGISTRATION_REQUESTS_COLLECTION)

    def list_pending(self) -> Sequence[RegistrationRequest]:
        query = self._collection().where("status", "==", PENDING).order_by(
            "submittedAt", direction=firestore.Query.DESCENDING
        )
        return [RegistrationRequest.from_document(r["id"], r) for r in stream_to_dicts(query.stream())]

    def get(self, request_id: str) -> Optional[RegistrationRequest]:
        row = snapshot_to_dict(self._collection().document(request_id).get())
        return RegistrationRequest.from_document(request_id, row) if row else None

    def approve(self, request: RegistrationRequest, *, approved_at: datetime) -> None:
        db = self._conn.firestore()
        batch = db.batch()
        batch.set(
            db.collection(USERS_COLLECTION).document(request.student_uid),
            request.to_user_document(approved_at),
            merge=True,
        )
        batch.update(
            self._collection().document(request.request_id),
            {"status": APPROVED, "approvedAt": approved_at},
        )
        batch.commit()

    def reject(self, request_id: str, *, reason: str, rejected_at: datetime) -> None:
        self._collection().document(request_id).update(
            {"status": REJECTED, "rejectionReason": reason, "rejectedAt": rejected_at}
        )


class FirestoreSystemMessageRepository(SystemMessageRepository):
    """Writes to users/{uid}/messages, read by the student app."""

    def __init__(self, conn: FirebaseConnection):
        self._conn = conn

    def send(self, student_uid: str, *, title: str, message: str, kind: str) -> None:
        messages = (
            self._conn.firestore()
            .collection(USERS_COLLECTION)
            .document(student_uid)
            .collection(MESSAGES_SUBCOLLECTION)
        )
        messages.add(
            {
                "title": title,
                "message": message,
                "type": kind,
                "read": False,
                "createdAt": now_utc(),
                "from": "admin",
            }
        )
