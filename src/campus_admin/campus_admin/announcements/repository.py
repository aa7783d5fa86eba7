from __future__ import annotations

from typing import Protocol, Sequence

from .model import Announcement


class AnnouncementRepository(Protocol):
    def list_recent(self) -> Sequence[Announcement]:
        raise NotImplementedError

    def add(self, announcement: Announcement) -> str:
        raise NotImplementedError

    def delete(self, announcement_id: str) -> None:
        raise NotImplementedError
