"""Gate for protected views."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, TypeVar

from .navigation import HOME_PATH, LOGIN_PATH, Navigator
from .session_manager import AuthSessionManager

T = TypeVar("T")


class GuardDecision(str, Enum):
    LOADING = "loading"
    ALLOW = "allow"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class GuardResult:
    decision: GuardDecision
    redirect_to: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.decision is GuardDecision.ALLOW


class RouteGuard:
    def __init__(self, auth: AuthSessionManager, navigator: Navigator) -> None:
        self._auth = auth
        self._navigator = navigator

    def check(self, required_role: Optional[str] = None) -> GuardResult:
        if self._auth.is_loading:
            return GuardResult(GuardDecision.LOADING)
        user = self._auth.user
        if user is None:
            # one validation attempt before giving up on the session
            seen = len(self._navigator.history)
            user = self._auth.validate_token().user
            if user is None:
                # a rejected token already sent the user to login
                already_sent = LOGIN_PATH in self._navigator.history[seen:]
                return self._redirect(LOGIN_PATH, navigate=not already_sent)
        if required_role and user.role != required_role:
            return self._redirect(HOME_PATH)
        return GuardResult(GuardDecision.ALLOW)

    def render(self, view: Callable[[], T], required_role: Optional[str] = None) -> Optional[T]:
        """Call `view` only when the guard allows it."""
        if not self.check(required_role).allowed:
            return None
        return view()

    def _redirect(self, path: str, navigate: bool = True) -> GuardResult:
        if navigate:
            self._navigator.navigate(path)
        return GuardResult(GuardDecision.REDIRECT, path)
