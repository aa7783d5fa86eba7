"""Shared setup for the one-shot admin scripts."""
from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.campus_admin.campus_admin.auth.firebase_identity import FirebaseIdentityAdmin
from src.campus_admin.campus_admin.core.exceptions import CredentialsMissingError
from src.campus_admin.campus_admin.firebase.connection import FirebaseConfig, FirebaseConnection
from src.campus_admin.campus_admin.students.firestore_repository import FirestoreStudentRepository


def connect() -> FirebaseConnection:
    """Initialize Firebase Admin or exit with setup instructions."""
    settings = importlib.import_module(get_settings_module())
    fb = dict(getattr(settings, "FIREBASE_CONFIG", {}))
    credentials_path = Path(fb.get("credentials_path") or "serviceAccountKey.json")
    if not credentials_path.is_absolute():
        credentials_path = REPO_ROOT / credentials_path

    conn = FirebaseConnection.get_instance(
        FirebaseConfig(
            credentials_path=str(credentials_path),
            project_id=fb.get("project_id") or None,
            credentials_json=fb.get("credentials_json") or None,
        )
    )
    try:
        conn.app
    except CredentialsMissingError as e:
        raise SystemExit(f"ERROR: {e}")
    return conn


def repositories(conn: FirebaseConnection):
    return FirestoreStudentRepository(conn), FirebaseIdentityAdmin(conn)
