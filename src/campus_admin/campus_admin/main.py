from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_ADMIN_REDIRECT, DEFAULT_SESSION_DAYS, DEFAULT_TOAST_DURATION_MS
from .announcements.controller import register as register_announcements
from .attendance.controller import register as register_attendance
from .auth.controller import register as register_auth
from .notifications.flask_toasts import ToastRegistry, init_toasts
from .pages.controller import register as register_pages
from .registrations.controller import register as register_registrations
from .students.controller import register as register_students

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__, template_folder="../../../templates", static_folder="../../../static")

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["DEFAULT_ADMIN_REDIRECT"] = getattr(settings, "DEFAULT_ADMIN_REDIRECT", DEFAULT_ADMIN_REDIRECT)
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    firebase_config = dict(getattr(settings, "FIREBASE_CONFIG", {}))
    if app.config["DEBUG"]:
        logger.info(
            "[campus-admin] settings=%s project=%s credentials=%s",
            settings_module,
            firebase_config.get("project_id") or "<from key>",
            firebase_config.get("credentials_path"),
        )

    if container is None:
        container = build_container(
            firebase_config=firebase_config,
            api_key=getattr(settings, "FIREBASE_API_KEY", ""),
        )
    app.extensions["campus_admin"] = container

    init_toasts(
        app,
        ToastRegistry(default_duration_ms=int(getattr(settings, "TOAST_DURATION_MS", DEFAULT_TOAST_DURATION_MS))),
    )

    register_auth(app, container)
    register_pages(app, container)
    register_students(app, container)
    register_attendance(app, container)
    register_registrations(app, container)
    register_announcements(app, container)

    return app
