from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Announcement:
    announcement_id: Optional[str]
    title: str
    message: str
    timestamp: datetime
    created_by: str
