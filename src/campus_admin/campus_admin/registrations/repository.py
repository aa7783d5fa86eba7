from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import RegistrationRequest


class RegistrationRepository(Protocol):
    def list_pending(self) -> Sequence[RegistrationRequest]:
        """Pending requests, newest submission first."""
        raise NotImplementedError

    def get(self, request_id: str) -> Optional[RegistrationRequest]:
        raise NotImplementedError

    def approve(self, request: RegistrationRequest, *, approved_at: datetime) -> None:
        """Create the student's users/{uid} profile and mark the request approved."""
        raise NotImplementedError

    def reject(self, request_id: str, *, reason: str, rejected_at: datetime) -> None:
        raise NotImplementedError


class SystemMessageRepository(Protocol):
    def send(self, student_uid: str, *, title: str, message: str, kind: str) -> None:
        raise NotImplementedError
