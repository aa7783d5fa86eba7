"""One-shot migrations run by the scripts/ entry points.

Each record is handled on its own: a failure is reported and counted, and
the batch goes on with the next record.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping

from ..auth.repository import IdentityAdmin
from ..common.datetime_utils import now_utc
from ..common.validators import normalize_email
from ..core.exceptions import NotFoundError
from ..firebase.firestore_base import as_str
from .csv_utils import generate_qr_id, generate_random_password, generate_username
from .model import MigrationTally, Student
from .repository import StudentRepository

Echo = Callable[[str], None]

DEMO_STUDENT = {
    "name": "Abhi",
    "rollNo": "23B21A4565",
    "year": "3",
    "backlogs": "0",
    "email": "abhi@example.com",
    "phoneNo": "9876543210",
    "linkedin": "",
    "github": "",
    "username": "23B21A4565",
    "qrId": "QR-19c0c7bc09f-uz8n4css",
}


def _account_exists(identity: IdentityAdmin, email: str) -> bool:
    try:
        identity.get_user_by_email(email)
    except NotFoundError:
        return False
    return True


def bulk_create_auth_accounts(
    students: StudentRepository,
    identity: IdentityAdmin,
    *,
    password_factory: Callable[[], str] = generate_random_password,
    echo: Echo = print,
) -> MigrationTally:
    """Create one auth account per student document that has none yet.

    Only ``uid`` is written back to the student document. Temporary
    passwords are generated here and returned in the tally; they are never
    read from or written to Firestore.
    """
    tally = MigrationTally()
    records = list(students.list_all())
    if not records:
        echo("No students found in Firestore")
        return tally

    echo(f"Found {len(records)} students. Starting bulk creation...")
    for student in records:
        email = normalize_email(student.email)
        try:
            if not email:
                echo(f"SKIP {student.name or student.doc_id} - missing email")
                tally.skipped += 1
                continue

            if _account_exists(identity, email):
                echo(f"SKIP {email} - already exists")
                tally.skipped += 1
                continue

            password = password_factory()
            uid = identity.create_user(
                email=email,
                password=password,
                display_name=student.name,
                email_verified=True,
            )
            students.link_uid(student.doc_id, uid)
            tally.credentials.append(
                {"name": student.name, "rollNo": student.roll_no, "email": email, "password": password}
            )
            echo(f"OK   {email} - created")
            tally.created += 1
        except Exception as e:
            echo(f"ERR  {student.email or 'unknown'} - {e}")
            tally.errors += 1

    return tally


def _normalize_keys(record: Mapping[str, Any]) -> Dict[str, str]:
    # CSV exports come with headers like "Rollno " or "Phone no".
    return {"".join(str(k).lower().split()): as_str(v) for k, v in record.items()}


def upload_students_from_records(
    records: Iterable[Mapping[str, Any]],
    students: StudentRepository,
    identity: IdentityAdmin,
    *,
    password_factory: Callable[[], str] = generate_random_password,
    echo: Echo = print,
) -> MigrationTally:
    tally = MigrationTally()
    for raw in records:
        row = _normalize_keys(raw)
        name = row.get("name", "")
        roll_no = row.get("rollno", "")
        email = normalize_email(row.get("email", ""))
        try:
            if not name or not roll_no or not email:
                echo("SKIP row - missing name, rollNo, or email")
                tally.skipped += 1
                continue

            if _account_exists(identity, email):
                echo(f"SKIP {email} - already exists in Auth")
                tally.skipped += 1
                continue

            password = password_factory()
            uid = identity.create_user(email=email, password=password, display_name=name, email_verified=True)

            username = generate_username(roll_no)
            qr_id = generate_qr_id()
            now = now_utc()
            students.save(
                Student(
                    doc_id=f"student-{roll_no}",
                    uid=uid,
                    name=name,
                    roll_no=roll_no,
                    email=email,
                    year=row.get("year") or "0",
                    backlogs=row.get("blacklogs") or row.get("backlogs") or "0",
                    phone_no=row.get("phoneno") or row.get("phone") or "",
                    linkedin=row.get("linkedin", ""),
                    github=row.get("github", ""),
                    username=username,
                    qr_id=qr_id,
                    created_at=now,
                    updated_at=now,
                )
            )
            tally.credentials.append(
                {
                    "name": name,
                    "rollNo": roll_no,
                    "email": email,
                    "username": username,
                    "password": password,
                    "qrId": qr_id,
                }
            )
            echo(f"OK   {name} ({roll_no}) username={username} qrId={qr_id}")
            tally.created += 1
        except Exception as e:
            echo(f"ERR  {email or 'unknown'} - {e}")
            tally.errors += 1

    return tally


def build_demo_student() -> Student:
    data = dict(DEMO_STUDENT)
    data["createdAt"] = now_utc()
    return Student.from_document(f"student-{data['rollNo']}", data)


def save_credentials(path: Path, credentials: List[Dict[str, str]]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(credentials, f, indent=2)
    return path


def format_tally(tally: MigrationTally, *, title: str) -> str:
    bar = "=" * 50
    return "\n".join(
        [
            bar,
            title,
            bar,
            f"Created: {tally.created}",
            f"Skipped: {tally.skipped}",
            f"Errors: {tally.errors}",
            bar,
        ]
    )
