from __future__ import annotations

from typing import Sequence

from ..auth.model import UserRef
from ..common.datetime_utils import now_utc
from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from .model import Announcement
from .repository import AnnouncementRepository


class AnnouncementService:
    def __init__(self, announcements: AnnouncementRepository):
        self._announcements = announcements

    def list_recent(self) -> Sequence[Announcement]:
        return self._announcements.list_recent()

    def post(self, *, title: str, message: str, author: UserRef) -> Announcement:
        announcement = Announcement(
            announcement_id=None,
            title=require_non_empty(title, "Title"),
            message=require_non_empty(message, "Message"),
            timestamp=now_utc(),
            created_by=author.email or "admin",
        )
        new_id = self._announcements.add(announcement)
        return Announcement(
            announcement_id=new_id,
            title=announcement.title,
            message=announcement.message,
            timestamp=announcement.timestamp,
            created_by=announcement.created_by,
        )

    def delete(self, announcement_id: str) -> None:
        if not announcement_id:
            raise ValidationError("Announcement id is required")
        self._announcements.delete(announcement_id)
