"""Normalized error shapes used by the storefront client."""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

AUTH_ERROR_CODES = frozenset({"TOKEN_EXPIRED", "TOKEN_INVALID", "NO_TOKEN"})


class ApiError(Exception):
    """Any failed API call, reduced to message + optional code + HTTP status."""

    def __init__(self, message: str, code: Optional[str] = None, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status

    def to_dict(self) -> dict:
        return {"message": self.message, "code": self.code, "status": self.status}


class AuthenticationError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class NetworkError(ApiError):
    pass


def is_auth_error(exc: BaseException) -> bool:
    if isinstance(exc, AuthenticationError):
        return True
    if not isinstance(exc, ApiError):
        return False
    if exc.status == 401 or exc.code in AUTH_ERROR_CODES:
        return True
    return "unauthorized" in (exc.message or "").lower()


class CheckoutError(Exception):
    pass


class CheckoutValidationError(CheckoutError):
    """Required checkout fields are blank."""

    def __init__(self, message: str, fields: Iterable[str]) -> None:
        super().__init__(message)
        self.message = message
        self.fields: Tuple[str, ...] = tuple(fields)


class EmptyCartError(CheckoutError):
    """Checkout refused; `browse_path` is where the user can go shopping instead."""

    def __init__(self, message: str, browse_path: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.browse_path = browse_path


class CheckoutStateError(CheckoutError):
    pass
