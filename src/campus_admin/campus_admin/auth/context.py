from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .model import LOADING, Authenticated, Loading, SessionState, UserRef

logger = logging.getLogger(__name__)

Listener = Callable[[SessionState], None]


class AuthContext:
    """Identity collaborator: owns the current session state.

    Starts as Loading. Readers either consume ``state`` (tagged union) or the
    flat ``current_user`` / ``is_admin`` / ``loading`` view. Subscribers are
    called on every change, in subscription order.
    """

    def __init__(self, state: SessionState = LOADING):
        self._state: SessionState = state
        self._listeners: List[Listener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def loading(self) -> bool:
        return isinstance(self._state, Loading)

    @property
    def current_user(self) -> Optional[UserRef]:
        if isinstance(self._state, Authenticated):
            return self._state.user
        return None

    @property
    def is_admin(self) -> bool:
        return isinstance(self._state, Authenticated) and self._state.is_admin

    @property
    def is_student(self) -> bool:
        user = self.current_user
        return bool(user and user.is_student)

    def set_state(self, state: SessionState) -> None:
        if state == self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
