"""CSV helpers for the student upload page.

The upload format is a plain comma-separated file with a header row; header
names are matched case-insensitively (``name``, ``email``, ``rollno``,
``year``, ``branch``, ``phoneno``, ``linkedin``, ``github``).
"""
from __future__ import annotations

import csv
import io
import secrets
import string
from typing import Dict, Iterable, List

from ..core.constants import GENERATED_PASSWORD_LENGTH
from .model import UploadResult

ParsedStudent = Dict[str, str]

SPECIAL_CHARS = "!@#$%^&*"
CREDENTIALS_HEADER = ("Name", "Roll Number", "Email", "Password")


def parse_csv(csv_text: str) -> List[ParsedStudent]:
    reader = csv.reader(io.StringIO((csv_text or "").strip()))
    header = next(reader, None)
    if not header:
        return []

    headers = [h.strip().lower() for h in header]
    rows: List[ParsedStudent] = []
    for values in reader:
        if not any(v.strip() for v in values):
            continue
        rows.append({h: (values[i].strip() if i < len(values) else "") for i, h in enumerate(headers)})
    return rows


def validate_student_row(row: ParsedStudent) -> List[str]:
    errors: List[str] = []
    if not str(row.get("name") or "").strip():
        errors.append("Name is required")
    if not str(row.get("rollno") or "").strip():
        errors.append("Roll number is required")
    return errors


def generate_credentials_csv(results: Iterable[UploadResult]) -> str:
    ok = [r for r in results if r.success and r.password]
    if not ok:
        return ""

    out = io.StringIO()
    out.write(",".join(CREDENTIALS_HEADER) + "\n")
    writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for r in ok:
        writer.writerow([r.name or "", r.roll_no or "", r.email or "", r.password or ""])
    return out.getvalue().rstrip("\n")


def generate_random_password(length: int = GENERATED_PASSWORD_LENGTH) -> str:
    """Random password with at least one upper, lower, digit and special char."""
    pools = [string.ascii_uppercase, string.ascii_lowercase, string.digits, SPECIAL_CHARS]
    alphabet = "".join(pools)
    chars = [secrets.choice(pool) for pool in pools]
    chars += [secrets.choice(alphabet) for _ in range(max(0, length - len(chars)))]
    secrets.SystemRandom().shuffle(chars)
    return "".join(chars)


def generate_username(roll_no: str) -> str:
    return "".join((roll_no or "").lower().split())


def generate_qr_id() -> str:
    return f"QR-{secrets.token_hex(8)}"
