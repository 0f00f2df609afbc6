"""Persisted bearer token storage."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

TOKEN_KEY = "token"

logger = logging.getLogger(__name__)


class TokenStore:
    """Keeps the bearer token under a well-known key in a small JSON file.

    Every read goes back to the file so that no caller works with a stale
    copy of the token.
    """

    def __init__(self, data_file: Path) -> None:
        self._data_file = Path(data_file)

    def get(self) -> Optional[str]:
        data = self._load()
        token = data.get(TOKEN_KEY)
        return str(token) if token else None

    def set(self, token: str) -> None:
        if not token:
            raise ValueError("token must be a non-empty string")
        data = self._load()
        data[TOKEN_KEY] = token
        self._write(data)

    def clear(self) -> None:
        data = self._load()
        if data.pop(TOKEN_KEY, None) is not None:
            self._write(data)

    def _load(self) -> dict:
        if not self._data_file.exists():
            return {}
        text = self._data_file.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        try:
            payload = json.loads(text)
        except json.JSONDecodeError:
            logger.warning("token file %s is corrupt, treating as empty", self._data_file)
            return {}
        return payload if isinstance(payload, dict) else {}

    def _write(self, data: dict) -> None:
        self._data_file.parent.mkdir(parents=True, exist_ok=True)
        self._data_file.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


class MemoryTokenStore:
    """Process-local token storage."""

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        if not token:
            raise ValueError("token must be a non-empty string")
        self._token = token

    def clear(self) -> None:
        self._token = None
