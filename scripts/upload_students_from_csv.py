"""Create auth accounts and student documents from a roster CSV.

Run: python scripts/upload_students_from_csv.py <path-to-csv>
"""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

from _bootstrap import REPO_ROOT, connect, repositories

from src.campus_admin.campus_admin.students.export import read_students_csv
from src.campus_admin.campus_admin.students.migration import (
    format_tally,
    save_credentials,
    upload_students_from_records,
)


def main(argv: list[str]) -> None:
    csv_path = Path(argv[1] if len(argv) > 1 else "./students.csv")
    if not csv_path.is_file():
        raise SystemExit(
            f"CSV file not found: {csv_path}\n"
            "Usage: python scripts/upload_students_from_csv.py <path-to-csv>"
        )

    students, identity = repositories(connect())

    print(f"Reading CSV file: {csv_path}\n")
    records = read_students_csv(csv_path)
    if not records:
        print("No records found in CSV")
        return

    print(f"Found {len(records)} students. Starting upload...\n")
    tally = upload_students_from_records(records, students, identity)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = save_credentials(REPO_ROOT / f"student-credentials-{ts}.json", tally.credentials)

    print()
    print(format_tally(tally, title="UPLOAD SUMMARY"))
    print(f"OK: Credentials saved: {out_file}")


if __name__ == "__main__":
    main(sys.argv)
