from __future__ import annotations

import pytest

ADMIN_AUTH = {"Authorization": "Bearer admin-token"}


def _reset(client, body, headers=ADMIN_AUTH):
    return client.post("/api/admin/resetStudentPassword", json=body, headers=headers)


def test_reset_password_missing_email_is_400(client):
    res = _reset(client, {"email": "", "newPassword": "x"})

    assert res.status_code == 400
    assert res.get_json() == {"success": False, "error": "Missing email or password"}


def test_reset_password_unknown_email_is_500(client):
    res = _reset(client, {"email": "nobody@school.edu", "newPassword": "newpass1"})

    assert res.status_code == 500
    assert res.get_json()["success"] is False
    assert res.get_json()["error"] == "User not found"


def test_reset_password_weak_password_is_500(client):
    res = _reset(client, {"email": "abhi@school.edu", "newPassword": "x"})

    assert res.status_code == 500
    assert res.get_json()["error"] == "Password is too weak"


def test_reset_password_success(client, identity):
    res = _reset(client, {"email": "abhi@school.edu", "newPassword": "newpass1"})

    assert res.status_code == 200
    assert res.get_json() == {"success": True, "message": "Password reset for abhi@school.edu"}
    assert identity.passwords["stu-1"] == "newpass1"


@pytest.mark.parametrize(
    "headers, status",
    [
        ({}, 401),
        ({"Authorization": "Bearer bogus"}, 401),
        ({"Authorization": "Bearer student-token"}, 403),
    ],
)
def test_admin_api_rejects_non_admins(client, headers, status):
    res = _reset(client, {"email": "abhi@school.edu", "newPassword": "newpass1"}, headers=headers)

    assert res.status_code == status
    assert res.get_json()["success"] is False


def test_admin_browser_session_is_accepted(client, login, admin_profile):
    login(admin_profile)

    res = _reset(client, {"email": "abhi@school.edu", "newPassword": "newpass1"}, headers={})

    assert res.status_code == 200


def test_create_student_endpoint(client, students):
    body = {"email": "new@school.edu", "password": "pass1234", "name": "New", "rollNo": "23B9"}

    res = client.post("/api/admin/createStudent", json=body, headers=ADMIN_AUTH)

    assert res.status_code == 201
    data = res.get_json()
    assert data["success"] is True
    assert students.get(data["uid"]).roll_no == "23B9"


def test_create_student_missing_fields_is_400(client):
    res = client.post("/api/admin/createStudent", json={"name": "X"}, headers=ADMIN_AUTH)
    assert res.status_code == 400


def test_create_student_duplicate_is_500(client):
    body = {"email": "abhi@school.edu", "password": "pass1234", "name": "Abhi", "rollNo": "1"}
    res = client.post("/api/admin/createStudent", json=body, headers=ADMIN_AUTH)
    assert res.status_code == 500
    assert res.get_json()["error"] == "Email already exists"


def test_bulk_upload_endpoint(client):
    body = {"students": [{"name": "Ravi", "rollno": "R1"}, {"name": "", "rollno": "R2"}]}

    res = client.post("/api/admin/bulkUploadCSV", json=body, headers=ADMIN_AUTH)

    assert res.status_code == 200
    data = res.get_json()
    assert (data["totalProcessed"], data["successful"], data["failed"]) == (2, 1, 1)
    assert data["results"][0]["email"] == "studentR1@school.local"


def test_bulk_upload_empty_is_400(client):
    res = client.post("/api/admin/bulkUploadCSV", json={"students": []}, headers=ADMIN_AUTH)
    assert res.status_code == 400
    assert res.get_json()["error"] == "No student data provided"


def test_auth_is_checked_before_body_validation(client):
    res = _reset(client, {"email": "", "newPassword": "x"}, headers={})

    assert res.status_code == 401
    assert res.get_json()["error"] == "Unauthorized - Missing or invalid token"
