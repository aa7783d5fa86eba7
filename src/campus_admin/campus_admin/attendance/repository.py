from __future__ import annotations

from typing import Optional, Protocol

from .model import AttendanceDay


class AttendanceRepository(Protocol):
    def get(self, day: str) -> Optional[AttendanceDay]:
        raise NotImplementedError

    def save(self, record: AttendanceDay) -> None:
        """Replace the day's document; a later submission wins."""
        raise NotImplementedError
