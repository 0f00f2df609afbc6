"""HTTP transport for the storefront API."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .errors import AUTH_ERROR_CODES, ApiError, AuthenticationError, NetworkError, NotFoundError

logger = logging.getLogger(__name__)


class ApiClient:
    """Thin JSON client over `requests`.

    The bearer token is read from the token store on every call. Failures of
    any kind leave this class as an ApiError subclass; callers never see a
    `requests` exception.
    """

    def __init__(self, base_url: str, token_store, *, timeout: float = 10.0, http=None) -> None:
        self.base_url = base_url.rstrip("/")
        self._tokens = token_store
        self._timeout = timeout
        self._http = http if http is not None else requests.Session()

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        require_auth: bool = True,
    ) -> Any:
        token = self._tokens.get()
        if require_auth and not token:
            raise AuthenticationError("Authentication required", code="NO_TOKEN")

        request_headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if token:
            request_headers["Authorization"] = f"Bearer {token}"
        request_headers.update(headers or {})

        url = f"{self.base_url}{path}"
        try:
            response = self._http.request(
                method,
                url,
                json=json,
                params=params,
                headers=request_headers,
                timeout=self._timeout,
            )
        except requests.exceptions.Timeout as exc:
            logger.warning("%s %s timed out", method, path)
            raise NetworkError("Request timed out") from exc
        except requests.exceptions.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise NetworkError(f"Network error: {type(exc).__name__}") from exc

        if response.ok:
            return self._decode(response)
        raise self._error_from(response)

    def get(self, path: str, **kwargs) -> Any:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, json: Optional[Any] = None, **kwargs) -> Any:
        return self.request("POST", path, json=json, **kwargs)

    def put(self, path: str, json: Optional[Any] = None, **kwargs) -> Any:
        return self.request("PUT", path, json=json, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request("DELETE", path, **kwargs)

    @staticmethod
    def _decode(response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError("Invalid JSON in response", status=response.status_code) from exc

    @staticmethod
    def _error_from(response) -> ApiError:
        status = response.status_code
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}
        message = body.get("message") or body.get("error") or f"Request failed with status {status}"
        code = body.get("code")
        if status == 401 or code in AUTH_ERROR_CODES:
            return AuthenticationError(message, code=code, status=status)
        if status == 404:
            return NotFoundError(message, code=code, status=status)
        return ApiError(message, code=code, status=status)
