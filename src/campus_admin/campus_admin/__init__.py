"""Campus Admin package.

Admin dashboard for the college attendance and student-management system.
Organized by feature modules (auth, guard, notifications, students, ...)
with a thin Flask controller layer over service/repository layers backed by
Firebase Authentication and Cloud Firestore.
"""
