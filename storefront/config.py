"""Storefront client settings."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path

from .common.config import validate_currency


@dataclass
class StorefrontConfig:
    """Where the API lives and where the client keeps its token."""

    api_base_url: str
    request_timeout: float
    data_dir: Path
    currency: str = "USD"

    @property
    def token_file(self) -> Path:
        override = os.environ.get("STOREFRONT_TOKEN_FILE")
        return Path(override) if override else self.data_dir / "session.json"

    @property
    def settings_file(self) -> Path:
        return self.data_dir / "settings.json"

    @classmethod
    def load(cls) -> "StorefrontConfig":
        """Build settings from data/settings.json, falling back to environment variables."""

        data_dir = Path(os.environ.get("STOREFRONT_DATA_DIR", "data")).expanduser()
        settings = {}
        settings_file = data_dir / "settings.json"
        if settings_file.exists():
            try:
                settings = json.loads(settings_file.read_text(encoding="utf-8"))
            except json.JSONDecodeError as exc:
                raise ValueError(f"settings file {settings_file} is not valid JSON") from exc
            if not isinstance(settings, dict):
                settings = {}

        api_base_url = (
            settings.get("STOREFRONT_API_URL")
            or os.environ.get("STOREFRONT_API_URL")
            or "http://localhost:5000"
        )
        timeout = settings.get("STOREFRONT_TIMEOUT") or os.environ.get("STOREFRONT_TIMEOUT") or "10"
        currency = settings.get("CURRENCY") or os.environ.get("CURRENCY") or "USD"

        return cls(
            api_base_url=str(api_base_url).rstrip("/"),
            request_timeout=float(timeout),
            data_dir=data_dir,
            currency=validate_currency(str(currency)),
        )
