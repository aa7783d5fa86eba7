from __future__ import annotations

import logging

from flask import Flask, redirect, render_template, request, session

from ..core.constants import DASHBOARD_ROUTE, LOGIN_ROUTE
from ..core.exceptions import AuthenticationError, ValidationError
from ..container import Container
from ..guard.flask_guard import SESSION_UID_KEY, current_auth, login_required
from ..notifications.flask_toasts import use_toast

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/", endpoint="home")
    def home():
        ctx = current_auth()
        if ctx.loading:
            return render_template("redirecting.html")
        if ctx.current_user is not None and ctx.is_admin:
            return redirect(DASHBOARD_ROUTE)
        return redirect(LOGIN_ROUTE)

    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        ctx = current_auth()
        if ctx.current_user is not None:
            return redirect(DASHBOARD_ROUTE if ctx.is_admin else app.config["DEFAULT_ADMIN_REDIRECT"])

        if request.method == "POST":
            email = request.form.get("email", "")
            password = request.form.get("password", "")
            remember = request.form.get("remember_me")

            try:
                user = container.auth_service.sign_in(
                    email,
                    password,
                    user_agent=request.headers.get("User-Agent", "unknown"),
                    platform=request.headers.get("Sec-CH-UA-Platform", "unknown").strip('"'),
                )

                session.permanent = bool(remember)
                session[SESSION_UID_KEY] = user.uid
                session.pop("last_seen_ms", None)

                use_toast().success(f"Welcome back, {user.name}!")
                if user.is_admin:
                    return redirect(DASHBOARD_ROUTE)
                return redirect(app.config["DEFAULT_ADMIN_REDIRECT"])
            except (AuthenticationError, ValidationError) as e:
                use_toast().error(str(e))
            except Exception as e:
                logger.exception("Login failed for %s", email)
                if bool(app.config.get("DEBUG", False)):
                    use_toast().error(f"Login failed: {e}")
                else:
                    use_toast().error("Login failed")

        return render_template("login.html")

    @app.route("/logout", methods=["GET", "POST"], endpoint="logout")
    def logout():
        container.auth_service.sign_out(current_auth().current_user)
        session.pop(SESSION_UID_KEY, None)
        session.pop("last_seen_ms", None)
        use_toast().success("Signed out.")
        return redirect(LOGIN_ROUTE)

    @app.route("/student-dashboard", endpoint="student_dashboard")
    @login_required
    def student_dashboard():
        return render_template("student_dashboard.html", user=current_auth().current_user)
