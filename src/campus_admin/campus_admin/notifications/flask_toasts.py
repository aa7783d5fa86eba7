from __future__ import annotations

import secrets
import threading
from typing import Callable, Dict, Tuple

from flask import Flask, g, has_request_context, jsonify, session

from ..common.datetime_utils import monotonic_ms
from ..core.constants import DEFAULT_TOAST_DURATION_MS, TOAST_PROVIDER_IDLE_MS
from ..core.exceptions import ToastProviderError
from .provider import ToastProvider
from .scheduler import DeadlineScheduler

SESSION_KEY = "toast_sid"


class ToastRegistry:
    """One ToastProvider per browser session, in process memory.

    Providers live as long as the process (a full restart drops them) and
    are discarded after ``idle_ms`` without a request.
    """

    def __init__(
        self,
        *,
        default_duration_ms: int = DEFAULT_TOAST_DURATION_MS,
        idle_ms: int = TOAST_PROVIDER_IDLE_MS,
        clock: Callable[[], int] = monotonic_ms,
    ):
        self._default_duration_ms = default_duration_ms
        self._idle_ms = idle_ms
        self._clock = clock
        self._providers: Dict[str, Tuple[ToastProvider, int]] = {}
        # Threaded WSGI servers may serve two sessions at once.
        self._lock = threading.Lock()

    def provider_for(self, sid: str) -> ToastProvider:
        now = int(self._clock())
        with self._lock:
            entry = self._providers.get(sid)
            if entry is None:
                provider = ToastProvider(
                    DeadlineScheduler(clock=self._clock),
                    default_duration_ms=self._default_duration_ms,
                )
            else:
                provider = entry[0]
            self._providers[sid] = (provider, now)
            return provider

    def prune(self) -> int:
        now = int(self._clock())
        with self._lock:
            stale = [sid for sid, (_, seen) in self._providers.items() if now - seen > self._idle_ms]
            removed = [self._providers.pop(sid)[0] for sid in stale]
        for provider in removed:
            provider.close()
        return len(removed)

    def __len__(self) -> int:
        return len(self._providers)


def _session_id() -> str:
    sid = session.get(SESSION_KEY)
    if not sid:
        sid = secrets.token_urlsafe(16)
        session[SESSION_KEY] = sid
    return sid


def use_toast() -> ToastProvider:
    """Toast provider of the current request.

    Raises ToastProviderError when called outside a request handled by an app
    with toasts installed.
    """
    if not has_request_context() or "toast_provider" not in g:
        raise ToastProviderError("use_toast must be used within ToastProvider")
    return g.toast_provider


def init_toasts(app: Flask, registry: ToastRegistry) -> None:
    app.extensions["toast_registry"] = registry

    @app.before_request
    def _bind_toast_provider():
        registry.prune()
        provider = registry.provider_for(_session_id())
        provider.pump()
        g.toast_provider = provider

    @app.context_processor
    def _inject_toasts():
        provider = g.get("toast_provider")
        if provider is None:
            return {"toasts": ()}
        provider.pump()
        return {"toasts": provider.toasts}

    @app.route("/api/toasts", methods=["GET"], endpoint="list_toasts")
    def list_toasts():
        return jsonify({"toasts": [t.to_dict() for t in use_toast().toasts]})

    @app.route("/api/toasts/<toast_id>/dismiss", methods=["POST"], endpoint="dismiss_toast")
    def dismiss_toast(toast_id: str):
        removed = use_toast().dismiss(toast_id)
        return jsonify({"success": True, "removed": removed})
