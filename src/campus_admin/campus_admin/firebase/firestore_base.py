from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional


def snapshot_to_dict(snapshot) -> Optional[Dict[str, Any]]:
    """Document snapshot -> dict with its id under ``id``; None when missing."""
    if snapshot is None or not snapshot.exists:
        return None
    data = snapshot.to_dict() or {}
    data.setdefault("id", snapshot.id)
    return data


def stream_to_dicts(snapshots: Iterable) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for snap in snapshots:
        row = snapshot_to_dict(snap)
        if row is not None:
            out.append(row)
    return out


def as_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
