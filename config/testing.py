SECRET_KEY = "test-secret"

FIREBASE_CONFIG = {
    "credentials_path": "tests/serviceAccountKey.json",
    "credentials_json": "",
    "project_id": "campus-admin-test",
}

FIREBASE_API_KEY = ""

DEFAULT_ADMIN_REDIRECT = "/student-dashboard"
TOAST_DURATION_MS = 4000
SESSION_DAYS = 7

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
