"""Bearer token lifecycle and the current user."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from ..common.services.logging import log_event
from .api_client import ApiClient
from .errors import ApiError, is_auth_error
from .navigation import ADMIN_DASHBOARD_PATH, HOME_PATH, LOGIN_PATH, Navigator, Notifier
from .query_cache import QueryCache

logger = logging.getLogger(__name__)

ROLES = ("user", "admin")


@dataclass(frozen=True)
class User:
    id: str
    role: str
    name: str
    email: str
    first_name: str = ""
    last_name: str = ""
    phone: str = ""

    @classmethod
    def from_dict(cls, payload: dict) -> "User":
        role = payload.get("role") or "user"
        if role not in ROLES:
            role = "user"
        return cls(
            id=str(payload["id"]),
            role=role,
            name=str(payload.get("name") or payload.get("username") or ""),
            email=str(payload.get("email") or ""),
            first_name=str(payload.get("firstName") or ""),
            last_name=str(payload.get("lastName") or ""),
            phone=str(payload.get("phone") or ""),
        )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


@dataclass(frozen=True)
class Session:
    """Validated token plus user; both present or both absent."""

    token: Optional[str] = None
    user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


SessionListener = Callable[[Session, Session], None]


class AuthSessionManager:
    """Owns the persisted token and the resolved user.

    Listeners registered with `subscribe` are called synchronously with
    `(previous, current)` every time the session changes, before the
    triggering call returns.
    """

    def __init__(
        self,
        api: ApiClient,
        token_store,
        navigator: Navigator,
        *,
        query_cache: Optional[QueryCache] = None,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self._api = api
        self._tokens = token_store
        self._navigator = navigator
        self._queries = query_cache
        self._notifier = notifier
        self._session = Session()
        self._listeners: List[SessionListener] = []
        self.is_loading = True

    @property
    def session(self) -> Session:
        return self._session

    @property
    def user(self) -> Optional[User]:
        return self._session.user

    @property
    def is_authenticated(self) -> bool:
        return self._session.user is not None and bool(self._tokens.get())

    def persisted_token(self) -> Optional[str]:
        return self._tokens.get()

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_session(self, session: Session) -> None:
        previous = self._session
        self._session = session
        if previous == session:
            return
        for listener in list(self._listeners):
            listener(previous, session)

    def validate_token(self) -> Session:
        """Resolve the persisted token into a user.

        Authentication failures end the session; anything else (network,
        5xx) keeps whatever session was there.
        """
        token = self._tokens.get()
        if not token:
            self.is_loading = False
            self._set_session(Session())
            return self._session
        try:
            payload = self._api.get("/api/users/profile")
        except ApiError as exc:
            self.is_loading = False
            if is_auth_error(exc):
                log_event("warning", "session.validate_failed", **exc.to_dict())
                self._tokens.clear()
                self._set_session(Session())
                self._navigator.navigate(LOGIN_PATH)
            else:
                logger.warning("token validation failed transiently: %s", exc.message)
            return self._session
        self.is_loading = False
        self._set_session(Session(token=token, user=User.from_dict(payload)))
        return self._session

    def login(self, token: str, user: Union[User, dict]) -> Session:
        if not isinstance(user, User):
            user = User.from_dict(user)
        self._tokens.set(token)
        self.is_loading = False
        self._set_session(Session(token=token, user=user))
        return self._session

    def update_user(self, user: Union[User, dict]) -> Session:
        """Swap in fresh profile data for the signed-in user; the token stays."""
        if not isinstance(user, User):
            user = User.from_dict(user)
        current = self._session
        if current.user is None or current.user.id != user.id:
            raise ValueError("can only refresh the signed-in user")
        self._set_session(Session(token=current.token, user=user))
        return self._session

    def authenticate(self, email: str, password: str) -> Session:
        """Log in with credentials and route by role."""
        try:
            payload = self._api.post(
                "/api/auth/login",
                {"email": email, "password": password},
                require_auth=False,
            )
        except ApiError as exc:
            if self._notifier is not None:
                self._notifier.error(exc.message or "Login failed")
            raise
        return self._enter(payload, "Login successful")

    def register(self, username: str, email: str, password: str) -> Session:
        try:
            payload = self._api.post(
                "/api/auth/register",
                {"username": username, "email": email, "password": password, "role": "user"},
                require_auth=False,
            )
        except ApiError as exc:
            if self._notifier is not None:
                self._notifier.error(exc.message or "Registration failed")
            raise
        return self._enter(payload, "Registration successful")

    def _enter(self, payload: dict, message: str) -> Session:
        session = self.login(payload["token"], payload["user"])
        log_event("info", "session.login", user_id=session.user.id, role=session.user.role)
        if self._notifier is not None:
            self._notifier.success(message)
        self._navigator.navigate(ADMIN_DASHBOARD_PATH if session.user.is_admin else HOME_PATH)
        return session

    def logout(self) -> None:
        user = self._session.user
        try:
            self._api.post("/api/auth/logout")
        except ApiError as exc:
            logger.warning("logout request failed: %s", exc.message)
        finally:
            self._tokens.clear()
            self._set_session(Session())
            if self._queries is not None:
                self._queries.clear()
            log_event("info", "session.logout", user_id=user.id if user else None)
            self._navigator.navigate(LOGIN_PATH)

    def invalidate(self) -> None:
        """Drop a session the server no longer accepts and send the user to login."""
        self._tokens.clear()
        self._set_session(Session())
        if self._queries is not None:
            self._queries.clear()
        self._navigator.navigate(LOGIN_PATH)
