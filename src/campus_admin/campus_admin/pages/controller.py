from __future__ import annotations

import logging

from flask import Flask, render_template, request, send_file

from ..auth.model import AuditLogEntry
from ..core.enums import LogAction
from ..core.exceptions import ValidationError
from ..container import Container
from ..guard.flask_guard import admin_required, current_auth, login_required
from ..notifications.flask_toasts import use_toast
from .qr import build_qr_payload, render_qr_png

logger = logging.getLogger(__name__)

DEFAULT_QR_ROLL_NO = "23B21A4565"
DEFAULT_QR_ID = "QR-19c0c7bc09f-uz8n4css"


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard", endpoint="dashboard")
    @admin_required
    def dashboard():
        stats = {"students": 0, "announcements": 0}
        latest = []
        try:
            stats["students"] = container.students_repo.count()
            latest = list(container.announcement_service.list_recent())
            stats["announcements"] = len(latest)
        except Exception:
            # Do not block the dashboard if Firestore is unavailable.
            logger.exception("Dashboard stats failed")
        return render_template(
            "admin/dashboard.html",
            user=current_auth().current_user,
            stats=stats,
            announcements=latest[:5],
            active_page="dashboard",
        )

    @app.route("/profile", endpoint="profile")
    @login_required
    def profile():
        user = current_auth().current_user
        container.audit_repo.write(
            AuditLogEntry(
                action=LogAction.PROFILE_VIEWED.value,
                message="Profile viewed",
                uid=user.uid,
                email=user.email,
                role=user.role.value,
                page="/profile",
            )
        )
        return render_template("profile.html", user=user, active_page="profile")

    @app.route("/qr-generator", methods=["GET", "POST"], endpoint="qr_generator")
    @admin_required
    def qr_generator():
        roll_no = request.form.get("roll_no", DEFAULT_QR_ROLL_NO)
        qr_id = request.form.get("qr_id", DEFAULT_QR_ID)
        qr_data = None
        if request.method == "POST":
            try:
                qr_data = build_qr_payload(qr_id, roll_no)
            except ValidationError as e:
                use_toast().error(str(e))
        return render_template(
            "admin/qr_generator.html",
            roll_no=roll_no,
            qr_id=qr_id,
            qr_data=qr_data,
            active_page="qr_generator",
        )

    @app.route("/qr-generator/image.png", endpoint="qr_image")
    @admin_required
    def qr_image():
        roll_no = request.args.get("roll_no", "")
        try:
            data = build_qr_payload(request.args.get("qr_id", ""), roll_no)
        except ValidationError as e:
            return str(e), 400
        return send_file(
            render_qr_png(data),
            mimetype="image/png",
            as_attachment=bool(request.args.get("download")),
            download_name=f"qr-{roll_no}.png",
        )
