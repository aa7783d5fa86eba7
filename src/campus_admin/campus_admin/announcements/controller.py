from __future__ import annotations

import logging

from flask import Flask, redirect, render_template, request, url_for

from ..core.exceptions import ValidationError
from ..container import Container
from ..guard.flask_guard import admin_required, current_auth
from ..notifications.flask_toasts import use_toast

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/announcements", methods=["GET", "POST"], endpoint="announcements")
    @admin_required
    def announcements():
        if request.method == "POST":
            try:
                container.announcement_service.post(
                    title=request.form.get("title", ""),
                    message=request.form.get("message", ""),
                    author=current_auth().current_user,
                )
                use_toast().success("Announcement posted")
                return redirect(url_for("announcements"))
            except ValidationError as e:
                use_toast().error(str(e))
            except Exception:
                logger.exception("Posting announcement failed")
                use_toast().error("Failed to post announcement")

        try:
            items = container.announcement_service.list_recent()
        except Exception:
            logger.exception("Loading announcements failed")
            items = []
        return render_template("admin/announcements.html", announcements=items, active_page="announcements")

    @app.route("/announcements/<announcement_id>/delete", methods=["POST"], endpoint="delete_announcement")
    @admin_required
    def delete_announcement(announcement_id: str):
        try:
            container.announcement_service.delete(announcement_id)
            use_toast().success("Announcement deleted")
        except ValidationError as e:
            use_toast().error(str(e))
        except Exception:
            logger.exception("Deleting announcement %s failed", announcement_id)
            use_toast().error("Failed to delete announcement")
        return redirect(url_for("announcements"))
