"""Navigation and notification signals handed to the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

HOME_PATH = "/"
LOGIN_PATH = "/login"
PRODUCTS_PATH = "/products"
CHECKOUT_PATH = "/checkout"
ADMIN_DASHBOARD_PATH = "/admin/dashboard"


def order_success_path(order_id: str) -> str:
    return f"/order/success?orderId={order_id}"


class Navigator:
    """Records navigation requests; an optional callback performs them."""

    def __init__(self, on_navigate: Optional[Callable[[str], None]] = None) -> None:
        self._on_navigate = on_navigate
        self.history: List[str] = []

    @property
    def location(self) -> Optional[str]:
        return self.history[-1] if self.history else None

    def navigate(self, path: str) -> None:
        self.history.append(path)
        if self._on_navigate is not None:
            self._on_navigate(path)


@dataclass(frozen=True)
class Notification:
    level: str
    message: str


class Notifier:
    """Transient user-visible messages (toasts)."""

    def __init__(self, on_notify: Optional[Callable[[Notification], None]] = None) -> None:
        self._on_notify = on_notify
        self.messages: List[Notification] = []

    def _push(self, level: str, message: str) -> None:
        note = Notification(level, message)
        self.messages.append(note)
        if self._on_notify is not None:
            self._on_notify(note)

    def success(self, message: str) -> None:
        self._push("success", message)

    def error(self, message: str) -> None:
        self._push("error", message)

    @property
    def last(self) -> Optional[Notification]:
        return self.messages[-1] if self.messages else None
