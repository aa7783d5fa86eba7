from __future__ import annotations

import logging
from typing import Sequence

from ..auth.model import AuditLogEntry, UserRef
from ..auth.repository import AuditLogRepository
from ..common.datetime_utils import now_utc
from ..core.enums import LogAction
from ..core.exceptions import NotFoundError, ValidationError
from ..firebase.firestore_base import as_str
from .model import DEFAULT_REJECTION_REASON, RegistrationRequest
from .repository import RegistrationRepository, SystemMessageRepository

logger = logging.getLogger(__name__)


class RegistrationService:
    """Use case: review student self-registrations.

    Approving creates the student's ``users/{uid}`` profile. Both outcomes
    leave a system message in the student's inbox.
    """

    def __init__(
        self,
        registrations: RegistrationRepository,
        messages: SystemMessageRepository,
        audit: AuditLogRepository,
    ):
        self._registrations = registrations
        self._messages = messages
        self._audit = audit

    def list_pending(self) -> Sequence[RegistrationRequest]:
        return self._registrations.list_pending()

    def _pending(self, request_id: str) -> RegistrationRequest:
        if not request_id:
            raise ValidationError("Request id is required")
        request = self._registrations.get(request_id)
        if request is None:
            raise NotFoundError("Registration request not found")
        if not request.is_pending:
            raise ValidationError(f"Request is already {request.status}")
        return request

    def approve(self, request_id: str, *, reviewer: UserRef) -> RegistrationRequest:
        request = self._pending(request_id)
        if not request.student_uid:
            raise ValidationError("Request has no student account")

        self._registrations.approve(request, approved_at=now_utc())
        self._notify(
            request,
            title="Registration Approved",
            message="Your registration has been approved. You can now use the app.",
            kind="approval",
        )
        self._log(LogAction.REGISTRATION_APPROVED, f"{request.name} approved", request, reviewer)
        return request

    def reject(self, request_id: str, *, reviewer: UserRef, reason: str = "") -> RegistrationRequest:
        request = self._pending(request_id)
        reason = as_str(reason)

        self._registrations.reject(
            request.request_id, reason=reason or DEFAULT_REJECTION_REASON, rejected_at=now_utc()
        )
        self._notify(
            request,
            title="Registration Rejected",
            message=reason or "Your registration was rejected. Please contact the admin.",
            kind="rejection",
        )
        self._log(LogAction.REGISTRATION_REJECTED, f"{request.name} rejected", request, reviewer)
        return request

    def _notify(self, request: RegistrationRequest, *, title: str, message: str, kind: str) -> None:
        if not request.student_uid:
            return
        try:
            self._messages.send(request.student_uid, title=title, message=message, kind=kind)
        except Exception:
            # The review itself is already committed.
            logger.exception("Sending %s message to %s failed", kind, request.student_uid)

    def _log(self, action: LogAction, message: str, request: RegistrationRequest, reviewer: UserRef) -> None:
        self._audit.write(
            AuditLogEntry(
                action=action.value,
                message=message,
                uid=reviewer.uid,
                email=reviewer.email,
                role=reviewer.role.value,
                page="/registration-requests",
                metadata={"requestId": request.request_id, "studentUid": request.student_uid},
            )
        )
