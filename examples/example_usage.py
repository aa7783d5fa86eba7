"""Example: use the service layer without Flask.

Lists the students in Firestore through the same container the web app uses.
"""

import importlib

from config import get_settings_module

from src.campus_admin.campus_admin.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        firebase_config=settings.FIREBASE_CONFIG,
        api_key=getattr(settings, "FIREBASE_API_KEY", ""),
    )
    for student in container.student_service.list_students():
        print(f"{student.roll_no:<12} {student.name:<24} {student.email}")


if __name__ == "__main__":
    main()
