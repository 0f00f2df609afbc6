"""Read-query cache with a single retry."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Hashable, Tuple

from .errors import ApiError, AuthenticationError, NotFoundError

logger = logging.getLogger(__name__)


class QueryCache:
    """Caches read results by key.

    A failed read is retried `retry` times unless the failure is an
    authentication or not-found error. Only reads go through here; cart and
    order mutations are never retried.
    """

    def __init__(self, retry: int = 1) -> None:
        self._retry = retry
        self._entries: Dict[Tuple[Hashable, ...], Any] = {}

    def fetch(self, key: Tuple[Hashable, ...], loader: Callable[[], Any]) -> Any:
        if key in self._entries:
            return self._entries[key]
        attempt = 0
        while True:
            try:
                value = loader()
                break
            except (AuthenticationError, NotFoundError):
                raise
            except ApiError as exc:
                if attempt >= self._retry:
                    raise
                attempt += 1
                logger.info("retrying query %s after %s", key, exc.message)
        self._entries[key] = value
        return value

    def invalidate(self, prefix: Hashable) -> None:
        for key in [k for k in self._entries if k and k[0] == prefix]:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key) -> bool:
        return key in self._entries
