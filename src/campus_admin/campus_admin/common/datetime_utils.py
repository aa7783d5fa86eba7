from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Optional


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch it.
    """
    return datetime.now(timezone.utc)


def epoch_ms() -> int:
    """Wall-clock milliseconds, used to derive toast ids."""
    return int(time.time() * 1000)


def monotonic_ms() -> int:
    """Monotonic milliseconds, used for timer deadlines."""
    return int(time.monotonic() * 1000)


def to_datetime(value: Any) -> Optional[datetime]:
    """Normalize Firestore timestamp values.

    The Firestore client returns timestamps as DatetimeWithNanoseconds (a
    datetime subclass); documents written by other tools can hold ISO
    strings or epoch seconds instead.
    """

    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return value

    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)

    if isinstance(value, str):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))

    raise TypeError(f"Unsupported timestamp value type: {type(value)!r}")
