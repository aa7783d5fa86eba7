from __future__ import annotations

from functools import wraps
from typing import Callable, List, Optional

from flask import current_app, g, redirect, render_template, session

from ..auth.context import AuthContext
from ..auth.model import UNAUTHENTICATED
from ..common.datetime_utils import monotonic_ms
from ..core.constants import LAST_SEEN_INTERVAL_MS, LOGIN_ROUTE
from .admin_guard import AdminGuard

SESSION_UID_KEY = "uid"


def current_auth() -> AuthContext:
    """AuthContext of the current request, resolved once per request."""
    ctx: Optional[AuthContext] = g.get("auth_context")
    if ctx is None:
        ctx = AuthContext()
        uid = session.get(SESSION_UID_KEY)
        if uid:
            container = current_app.extensions["campus_admin"]
            ctx.set_state(container.auth_service.resolve(uid))
            _refresh_last_seen(container, uid)
        else:
            ctx.set_state(UNAUTHENTICATED)
        g.auth_context = ctx
    return ctx


def _refresh_last_seen(container, uid: str) -> None:
    now = monotonic_ms()
    last = session.get("last_seen_ms")
    if last is None or now - int(last) >= LAST_SEEN_INTERVAL_MS:
        session["last_seen_ms"] = now
        container.auth_service.touch(uid)


def admin_required(view: Optional[Callable] = None, *, redirect_to: Optional[str] = None):
    """Gate a view behind AdminGuard.

    Usable bare (``@admin_required``) or with an override target
    (``@admin_required(redirect_to="/profile")``).
    """

    def decorate(fn: Callable) -> Callable:
        @wraps(fn)
        def wrapper(*args, **kwargs):
            targets: List[str] = []
            guard = AdminGuard(
                targets.append,
                redirect_to=redirect_to or current_app.config.get("DEFAULT_ADMIN_REDIRECT"),
                login_route=LOGIN_ROUTE,
            )
            guard.mount()
            decision = guard.attach(current_auth())
            guard.detach()

            if decision.render_children:
                return fn(*args, **kwargs)
            if targets:
                return redirect(targets[-1])
            return render_template("guard/verifying.html"), 200

        return wrapper

    if view is not None:
        return decorate(view)
    return decorate


def login_required(view: Callable) -> Callable:
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_auth().current_user is None:
            return redirect(LOGIN_ROUTE)
        return view(*args, **kwargs)

    return wrapper
