import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

FIREBASE_CONFIG = {
    "credentials_path": os.getenv("FIREBASE_CREDENTIALS_PATH", "serviceAccountKey.json"),
    "credentials_json": os.getenv("FIREBASE_ADMIN_SDK_KEY", ""),
    "project_id": os.getenv("FIREBASE_PROJECT_ID", ""),
}

FIREBASE_API_KEY = os.getenv("FIREBASE_API_KEY", "")

DEFAULT_ADMIN_REDIRECT = os.getenv("DEFAULT_ADMIN_REDIRECT", "/student-dashboard")
TOAST_DURATION_MS = int(os.getenv("TOAST_DURATION_MS", "4000"))
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
