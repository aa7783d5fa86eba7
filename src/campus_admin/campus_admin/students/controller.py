from __future__ import annotations

import logging
from urllib.parse import quote

from flask import Flask, jsonify, render_template, request, send_file

from ..auth.model import UserRef
from ..core.exceptions import (
    AccountExistsError,
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    ValidationError,
    WeakPasswordError,
)
from ..container import Container
from ..guard.flask_guard import admin_required, current_auth
from ..notifications.flask_toasts import use_toast
from .csv_utils import generate_credentials_csv, parse_csv, validate_student_row
from .export import export_students_xlsx

logger = logging.getLogger(__name__)

# Provider errors a caller cannot fix by changing the request shape.
_SERVER_SIDE_ERRORS = (NotFoundError, WeakPasswordError, AccountExistsError)


def _error(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


def register(app: Flask, container: Container) -> None:
    def api_admin() -> UserRef:
        """Admin behind an API call: the signed-in browser session, or a
        ``Bearer`` Firebase ID token.

        Every admin endpoint calls this before reading the body, so a caller
        without admin rights gets 401/403 even for a malformed body; 400 is
        only returned to admins.
        """
        ctx = current_auth()
        if ctx.current_user is not None and ctx.is_admin:
            return ctx.current_user
        return container.student_service.require_admin(request.headers.get("Authorization"))

    @app.route("/students", endpoint="students")
    @admin_required
    def students():
        try:
            rows = container.student_service.list_students()
        except Exception:
            logger.exception("Loading students failed")
            use_toast().error("Failed to load students")
            rows = []
        return render_template("admin/students.html", students=rows, active_page="students")

    @app.route("/students/export", endpoint="export_students")
    @admin_required
    def export_students():
        out = export_students_xlsx(container.student_service.list_students())
        return send_file(
            out,
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            as_attachment=True,
            download_name="students.xlsx",
        )

    @app.route("/csv-upload", methods=["GET", "POST"], endpoint="csv_upload")
    @admin_required
    def csv_upload():
        report = None
        row_errors = []
        credentials_href = None

        if request.method == "POST":
            upload = request.files.get("file")
            text = upload.read().decode("utf-8-sig") if upload and upload.filename else request.form.get("csv_text", "")
            rows = parse_csv(text)

            for i, row in enumerate(rows, start=1):
                errors = validate_student_row(row)
                if errors:
                    row_errors.append({"row": i, "errors": errors})

            if not rows:
                use_toast().error("No student rows found in the CSV")
            elif row_errors:
                use_toast().error(f"{len(row_errors)} row(s) need fixing before upload")
            else:
                try:
                    report = container.student_service.bulk_upload(rows, created_by=current_auth().current_user)
                    credentials = generate_credentials_csv(report.results)
                    if credentials:
                        credentials_href = "data:text/csv;charset=utf-8," + quote(credentials)
                    if report.failed:
                        use_toast().error(f"{report.successful} created, {report.failed} failed")
                    else:
                        use_toast().success(f"{report.successful} students created")
                except DomainError as e:
                    use_toast().error(str(e))
                except Exception:
                    logger.exception("CSV upload failed")
                    use_toast().error("CSV upload failed")

        return render_template(
            "admin/csv_upload.html",
            report=report,
            row_errors=row_errors,
            credentials_href=credentials_href,
            active_page="csv_upload",
        )

    @app.route("/api/admin/resetStudentPassword", methods=["POST"], endpoint="api_reset_student_password")
    def api_reset_student_password():
        try:
            api_admin()
            body = request.get_json(silent=True) or {}
            message = container.student_service.reset_password(
                str(body.get("email") or ""), str(body.get("newPassword") or "")
            )
            return jsonify({"success": True, "message": message}), 200
        except AuthenticationError as e:
            return _error(str(e), 401)
        except AuthorizationError as e:
            return _error(str(e), 403)
        except _SERVER_SIDE_ERRORS as e:
            return _error(str(e), 500)
        except ValidationError as e:
            return _error(str(e), 400)
        except Exception as e:
            logger.exception("Error resetting password")
            return _error(str(e) or "Failed to reset password", 500)

    @app.route("/api/admin/createStudent", methods=["POST"], endpoint="api_create_student")
    def api_create_student():
        try:
            admin = api_admin()
            body = request.get_json(silent=True) or {}
            result = container.student_service.create_student(body, created_by=admin)
            return jsonify(result), 201
        except AuthenticationError as e:
            return _error(str(e), 401)
        except AuthorizationError as e:
            return _error(str(e), 403)
        except _SERVER_SIDE_ERRORS as e:
            return _error(str(e), 500)
        except ValidationError as e:
            return _error(str(e), 400)
        except Exception as e:
            logger.exception("Error creating student")
            return _error(str(e) or "Internal server error", 500)

    @app.route("/api/admin/bulkUploadCSV", methods=["POST"], endpoint="api_bulk_upload_csv")
    def api_bulk_upload_csv():
        try:
            admin = api_admin()
            body = request.get_json(silent=True) or {}
            report = container.student_service.bulk_upload(body.get("students") or [], created_by=admin)
            return jsonify(report.to_dict()), 200
        except AuthenticationError as e:
            return _error(str(e), 401)
        except AuthorizationError as e:
            return _error(str(e), 403)
        except ValidationError as e:
            return _error(str(e), 400)
        except Exception as e:
            logger.exception("Error in bulk upload")
            return _error(str(e) or "Internal server error", 500)
