from __future__ import annotations

import itertools
import logging
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..common.datetime_utils import epoch_ms
from ..core.constants import DEFAULT_TOAST_DURATION_MS
from ..core.enums import ToastKind
from ..core.exceptions import ValidationError
from .model import ToastMessage
from .scheduler import DeadlineScheduler, TimerHandle

logger = logging.getLogger(__name__)


class ToastProvider:
    """Provider-scoped queue of transient notifications.

    Toasts are kept in insertion order. Each one owns an expiry timer and is
    removed by id, so toasts with different durations expire independently.
    Dismissing a toast cancels its timer; a timer for an id that is already
    gone does nothing. After ``close()`` the provider ignores every call.
    """

    def __init__(
        self,
        scheduler: Optional[DeadlineScheduler] = None,
        *,
        default_duration_ms: int = DEFAULT_TOAST_DURATION_MS,
        id_clock: Callable[[], int] = epoch_ms,
    ):
        self._scheduler = scheduler or DeadlineScheduler()
        self._default_duration_ms = int(default_duration_ms)
        self._id_clock = id_clock
        self._counter = itertools.count()
        self._toasts: List[ToastMessage] = []
        self._timers: Dict[str, TimerHandle] = {}
        self._closed = False

    @property
    def scheduler(self) -> DeadlineScheduler:
        return self._scheduler

    @property
    def toasts(self) -> Tuple[ToastMessage, ...]:
        return tuple(self._toasts)

    @property
    def closed(self) -> bool:
        return self._closed

    def _next_id(self) -> str:
        # Timestamp alone collides for calls within the same millisecond.
        return f"{int(self._id_clock())}-{next(self._counter)}"

    def show_toast(
        self,
        message: str,
        kind: Union[ToastKind, str],
        duration_ms: Optional[int] = None,
    ) -> None:
        if self._closed:
            logger.debug("show_toast after close ignored: %s", message)
            return

        try:
            kind = ToastKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown toast type: {kind!r}")

        duration = self._default_duration_ms if duration_ms is None else int(duration_ms)
        if duration < 0:
            raise ValidationError("Toast duration must not be negative")

        toast = ToastMessage(id=self._next_id(), message=str(message), kind=kind, duration_ms=duration)
        self._toasts.append(toast)
        self._timers[toast.id] = self._scheduler.call_later(duration, lambda: self._expire(toast.id))

    def success(self, message: str, duration_ms: Optional[int] = None) -> None:
        self.show_toast(message, ToastKind.SUCCESS, duration_ms)

    def error(self, message: str, duration_ms: Optional[int] = None) -> None:
        self.show_toast(message, ToastKind.ERROR, duration_ms)

    def _remove(self, toast_id: str) -> bool:
        before = len(self._toasts)
        self._toasts = [t for t in self._toasts if t.id != toast_id]
        return len(self._toasts) != before

    def _expire(self, toast_id: str) -> None:
        self._timers.pop(toast_id, None)
        if self._closed:
            return
        self._remove(toast_id)

    def dismiss(self, toast_id: str) -> bool:
        """Close a toast now. Returns False when the id is not displayed."""
        handle = self._timers.pop(toast_id, None)
        if handle is not None:
            handle.cancel()
        if self._closed:
            return False
        return self._remove(toast_id)

    def pump(self, now_ms: Optional[int] = None) -> int:
        """Fire due expiry timers."""
        if self._closed:
            return 0
        return self._scheduler.run_due(now_ms)

    def close(self) -> None:
        """Unmount: cancel pending timers, drop the queue."""
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        self._toasts.clear()
        self._closed = True
