"""Create Firebase Auth accounts for every student document.

Run: python scripts/bulk_create_auth_users.py

Students that already have an account are skipped. Temporary passwords are
written to student-credentials-<timestamp>.json in the repo root; hand them
out and delete the file.
"""

from __future__ import annotations

from datetime import datetime

from _bootstrap import REPO_ROOT, connect, repositories

from src.campus_admin.campus_admin.students.migration import (
    bulk_create_auth_accounts,
    format_tally,
    save_credentials,
)


def main() -> None:
    students, identity = repositories(connect())

    print("Fetching all students from Firestore...\n")
    tally = bulk_create_auth_accounts(students, identity)

    print()
    print(format_tally(tally, title="BULK CREATION SUMMARY"))

    if tally.credentials:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        out_file = save_credentials(REPO_ROOT / f"student-credentials-{ts}.json", tally.credentials)
        print(f"OK: Credentials saved: {out_file}")
        print("Students can now sign in with email + temporary password.")


if __name__ == "__main__":
    main()
