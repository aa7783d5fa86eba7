from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import ToastKind


@dataclass(frozen=True)
class ToastMessage:
    id: str
    message: str
    kind: ToastKind
    duration_ms: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "message": self.message,
            "type": self.kind.value,
            "duration": self.duration_ms,
        }
