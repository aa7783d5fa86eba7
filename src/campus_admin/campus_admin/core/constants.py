"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOAST_DURATION_MS = 4000
DEFAULT_SESSION_DAYS = 7
DEFAULT_ADMIN_REDIRECT = "/student-dashboard"
LOGIN_ROUTE = "/login"
DASHBOARD_ROUTE = "/dashboard"

# activeSessions.lastSeen is refreshed at most this often per browser session.
LAST_SEEN_INTERVAL_MS = 30_000

# Idle toast providers are dropped from the registry after this long.
TOAST_PROVIDER_IDLE_MS = 60 * 60 * 1000

GENERATED_PASSWORD_LENGTH = 12
FALLBACK_EMAIL_DOMAIN = "school.local"

USERS_COLLECTION = "users"
STUDENTS_COLLECTION = "students"
ACTIVE_SESSIONS_COLLECTION = "activeSessions"
LOGS_COLLECTION = "logs"
ANNOUNCEMENTS_COLLECTION = "announcements"
ATTENDANCE_COLLECTION = "attendance"
REGISTRATION_REQUESTS_COLLECTION = "registrationRequests"
# users/{uid}/messages
MESSAGES_SUBCOLLECTION = "messages"
