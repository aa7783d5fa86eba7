from __future__ import annotations

import logging

from flask import Flask, redirect, render_template, request, url_for

from ..core.exceptions import DomainError, ValidationError
from ..container import Container
from ..guard.flask_guard import admin_required, current_auth
from ..notifications.flask_toasts import use_toast

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/attendance", methods=["GET", "POST"], endpoint="attendance")
    @admin_required
    def attendance():
        service = container.attendance_service
        if request.method == "POST":
            present = list(request.form.getlist("present"))
            for line in request.form.get("scanned", "").splitlines():
                if not line.strip():
                    continue
                try:
                    present.append(service.match_scan(line).roll_no)
                except DomainError as e:
                    use_toast().error(str(e))
            try:
                record = service.submit(present, submitted_by=current_auth().current_user)
                use_toast().success(
                    f"Attendance submitted: {record.present_count} present, {record.absent_count} absent"
                )
                return redirect(url_for("attendance"))
            except ValidationError as e:
                use_toast().error(str(e))
            except Exception:
                logger.exception("Submitting attendance failed")
                use_toast().error("Failed to submit attendance")

        try:
            roster = service.roster()
            today = service.get_day()
        except Exception:
            logger.exception("Loading attendance failed")
            use_toast().error("Failed to load attendance")
            roster, today = [], None
        checked = set(today.present) if today else set()
        return render_template(
            "admin/attendance.html",
            roster=roster,
            today=today,
            checked=checked,
            active_page="attendance",
        )
