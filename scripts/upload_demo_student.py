"""Write the demo student document.

Run: python scripts/upload_demo_student.py
"""

from __future__ import annotations

from _bootstrap import connect, repositories

from src.campus_admin.campus_admin.students.migration import build_demo_student


def main() -> None:
    students, _ = repositories(connect())
    student = build_demo_student()
    students.save(student)
    print(f"OK: Student uploaded -> students/{student.doc_id}")
    print(f"Roll No: {student.roll_no}")
    print(f"Username: {student.username}")
    print(f"QR ID: {student.qr_id}")


if __name__ == "__main__":
    main()
