from __future__ import annotations

from typing import Sequence

from firebase_admin import firestore

from ..common.datetime_utils import to_datetime
from ..core.constants import ANNOUNCEMENTS_COLLECTION
from ..firebase.connection import FirebaseConnection
from ..firebase.firestore_base import stream_to_dicts
from .model import Announcement
from .repository import AnnouncementRepository


class FirestoreAnnouncementRepository(AnnouncementRepository):
    def __init__(self, conn: FirebaseConnection):
        self._conn = conn

    def _collection(self):
        return self._conn.firestore().collection(ANNOUNCEMENTS_COLLECTION)

    def list_recent(self) -> Sequence[Announcement]:
        query = self._collection().order_by("timestamp", direction=firestore.Query.DESCENDING)
        return [
            Announcement(
                announcement_id=r["id"],
                title=r.get("title", ""),
                message=r.get("message", ""),
                timestamp=to_datetime(r.get("timestamp")),
                created_by=r.get("createdBy", "admin"),
            )
            for r in stream_to_dicts(query.stream())
        ]

    def add(self, announcement: Announcement) -> str:
        _, ref = self._collection().add(
            {
                "title": announcement.title,
                "message": announcement.message,
                "timestamp": announcement.timestamp,
                "createdBy": announcement.created_by,
            }
        )
        return ref.id

    def delete(self, announcement_id: str) -> None:
        self._collection().document(announcement_id).delete()
