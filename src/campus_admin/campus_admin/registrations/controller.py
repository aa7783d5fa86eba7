from __future__ import annotations

import logging

from flask import Flask, redirect, render_template, request, url_for

from ..core.exceptions import DomainError
from ..container import Container
from ..guard.flask_guard import admin_required, current_auth
from ..notifications.flask_toasts import use_toast

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/registration-requests", endpoint="registration_requests")
    @admin_required
    def registration_requests():
        try:
            pending = container.registration_service.list_pending()
        except Exception:
            logger.exception("Loading registration requests failed")
            use_toast().error("Failed to load registration requests")
            pending = []
        return render_template(
            "admin/registration_requests.html", requests=pending, active_page="registration_requests"
        )

    @app.route("/registration-requests/<request_id>/approve", methods=["POST"], endpoint="approve_registration")
    @admin_required
    def approve_registration(request_id: str):
        try:
            approved = container.registration_service.approve(request_id, reviewer=current_auth().current_user)
            use_toast().success(f"{approved.name} approved successfully!")
        except DomainError as e:
            use_toast().error(str(e))
        except Exception:
            logger.exception("Approving registration %s failed", request_id)
            use_toast().error("Failed to approve student")
        return redirect(url_for("registration_requests"))

    @app.route("/registration-requests/<request_id>/reject", methods=["POST"], endpoint="reject_registration")
    @admin_required
    def reject_registration(request_id: str):
        try:
            rejected = container.registration_service.reject(
                request_id,
                reviewer=current_auth().current_user,
                reason=request.form.get("reason", ""),
            )
            use_toast().success(f"{rejected.name} rejected")
        except DomainError as e:
            use_toast().error(str(e))
        except Exception:
            logger.exception("Rejecting registration %s failed", request_id)
            use_toast().error("Failed to reject student")
        return redirect(url_for("registration_requests"))
