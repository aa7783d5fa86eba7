from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..core.constants import ACTIVE_SESSIONS_COLLECTION, LOGS_COLLECTION, USERS_COLLECTION
from ..common.datetime_utils import now_utc
from ..firebase.connection import FirebaseConnection
from ..firebase.firestore_base import snapshot_to_dict
from .model import ActiveSession, AuditLogEntry, UserProfile
from .repository import ActiveSessionRepository, AuditLogRepository, UserProfileRepository

logger = logging.getLogger(__name__)


class FirestoreUserProfileRepository(UserProfileRepository):
    def __init__(self, conn: FirebaseConnection):
        self._conn = conn

    def get(self, uid: str) -> Optional[UserProfile]:
        snap = self._conn.firestore().collection(USERS_COLLECTION).document(uid).get()
        row = snapshot_to_dict(snap)
        if not row:
            return None
        return UserProfile.from_document(uid, row)

    def save(self, profile: UserProfile) -> None:
        doc = profile.to_document()
        if doc.get("createdAt") is None:
            doc["createdAt"] = now_utc()
        self._conn.firestore().collection(USERS_COLLECTION).document(profile.uid).set(doc)


class FirestoreActiveSessionRepository(ActiveSessionRepository):
    def __init__(self, conn: FirebaseConnection):
        self._conn = conn

    def _doc(self, uid: str):
        return self._conn.firestore().collection(ACTIVE_SESSIONS_COLLECTION).document(uid)

    def upsert(self, active: ActiveSession) -> None:
        self._doc(active.uid).set(
            {
                "uid": active.uid,
                "email": active.email,
                "role": active.role.value,
                "name": active.name,
                "loginAt": active.login_at,
                "lastSeen": active.last_seen,
                "userAgent": active.user_agent,
                "platform": active.platform,
            },
            merge=True,
        )

    def touch(self, uid: str, *, last_seen: datetime) -> None:
        self._doc(uid).update({"lastSeen": last_seen})

    def delete(self, uid: str) -> None:
        self._doc(uid).delete()


class FirestoreAuditLogRepository(AuditLogRepository):
    """Writes audit entries to the logs collection.

    A failed write is logged and dropped.
    """

    def __init__(self, conn: FirebaseConnection):
        self._conn = conn

    def write(self, entry: AuditLogEntry) -> None:
        try:
            self._conn.firestore().collection(LOGS_COLLECTION).add(
                {
                    "timestamp": now_utc(),
                    "uid": entry.uid or "anonymous",
                    "email": entry.email or "unknown",
                    "role": entry.role or "unknown",
                    "action": entry.action,
                    "page": entry.page or "unknown",
                    "message": entry.message,
                    "metadata": entry.metadata or {},
                }
            )
        except Exception:
            logger.exception("Failed to write audit log %s", entry.action)
