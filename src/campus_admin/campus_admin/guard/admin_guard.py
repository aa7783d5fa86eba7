from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..auth.context import AuthContext
from ..auth.model import LOADING, Authenticated, Loading, SessionState, Unauthenticated
from ..core.constants import DEFAULT_ADMIN_REDIRECT, LOGIN_ROUTE

Navigate = Callable[[str], None]


class GuardPhase(str, Enum):
    INITIALIZING = "INITIALIZING"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    AUTHENTICATED_NON_ADMIN = "AUTHENTICATED_NON_ADMIN"
    AUTHENTICATED_ADMIN = "AUTHENTICATED_ADMIN"


@dataclass(frozen=True)
class GuardDecision:
    phase: GuardPhase
    # Where the guard navigated (or would navigate) for this phase.
    target: Optional[str] = None

    @property
    def render_children(self) -> bool:
        return self.phase == GuardPhase.AUTHENTICATED_ADMIN

    @property
    def show_placeholder(self) -> bool:
        return not self.render_children


class AdminGuard:
    """Render gate for admin-only pages.

    * Loading session or not yet mounted -> placeholder, no navigation.
    * No session -> navigate to the login route, keep the placeholder.
    * Non-admin session -> navigate to ``redirect_to``, keep the placeholder.
    * Admin session -> render children.

    Navigation happens once per phase transition: evaluating the same phase
    again is silent, a later change (e.g. sign-out) navigates again.
    """

    def __init__(
        self,
        navigate: Navigate,
        *,
        redirect_to: str = DEFAULT_ADMIN_REDIRECT,
        login_route: str = LOGIN_ROUTE,
    ):
        self._navigate = navigate
        self.redirect_to = redirect_to or DEFAULT_ADMIN_REDIRECT
        self.login_route = login_route
        self._mounted = False
        self._state: SessionState = LOADING
        self._last_phase: Optional[GuardPhase] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self.decision = GuardDecision(GuardPhase.INITIALIZING)

    @property
    def mounted(self) -> bool:
        return self._mounted

    def _classify(self, state: SessionState) -> GuardDecision:
        if not self._mounted or isinstance(state, Loading):
            return GuardDecision(GuardPhase.INITIALIZING)
        if isinstance(state, Unauthenticated):
            return GuardDecision(GuardPhase.UNAUTHENTICATED, self.login_route)
        if isinstance(state, Authenticated):
            if state.is_admin:
                return GuardDecision(GuardPhase.AUTHENTICATED_ADMIN)
            return GuardDecision(GuardPhase.AUTHENTICATED_NON_ADMIN, self.redirect_to)
        raise TypeError(f"Unsupported session state: {state!r}")

    def evaluate(self, state: SessionState) -> GuardDecision:
        self._state = state
        decision = self._classify(state)
        if decision.phase != self._last_phase:
            self._last_phase = decision.phase
            if decision.target is not None:
                self._navigate(decision.target)
        self.decision = decision
        return decision

    def mount(self) -> GuardDecision:
        """Complete the first render pass and re-evaluate the last seen state."""
        self._mounted = True
        return self.evaluate(self._state)

    def attach(self, context: AuthContext) -> GuardDecision:
        """Follow an AuthContext: every state change is re-evaluated."""
        self.detach()
        self._unsubscribe = context.subscribe(self.evaluate)
        return self.evaluate(context.state)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
