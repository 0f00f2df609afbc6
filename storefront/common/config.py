import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
import json
from typing import Optional


@dataclass
class AppConfig:
    database_url: str
    secret_key: str
    log_level: str
    currency: str
    token_ttl_seconds: int
    free_shipping_threshold: Decimal
    flat_shipping_rate: Decimal
    admin_email: str
    admin_password: str


def validate_currency(value: Optional[str]) -> str:
    v = (value or "USD").strip().upper()
    if len(v) != 3:
        raise ValueError("Invalid currency code: expected ISO4217 length 3")
    return v


def _load_settings_file() -> dict:
    path = Path(os.getenv("STOREFRONT_SETTINGS", "data/settings.json"))
    if not path.exists():
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"settings file {path} is not valid JSON") from exc
    return payload if isinstance(payload, dict) else {}


def load_env() -> AppConfig:
    # data/settings.json first, environment as fallback
    s = _load_settings_file()

    def pick(key: str, default: str) -> str:
        value = s.get(key)
        if value is None or str(value).strip() == "":
            value = os.getenv(key, default)
        return str(value)

    return AppConfig(
        database_url=pick("DATABASE_URL", "sqlite:///data/storefront.db"),
        secret_key=pick("SECRET_KEY", "dev_secret"),
        log_level=pick("LOG_LEVEL", "INFO").upper(),
        currency=validate_currency(pick("CURRENCY", "USD")),
        token_ttl_seconds=int(pick("TOKEN_TTL_SECONDS", "86400")),
        free_shipping_threshold=Decimal(pick("FREE_SHIPPING_THRESHOLD", "50.00")),
        flat_shipping_rate=Decimal(pick("FLAT_SHIPPING_RATE", "5.99")),
        admin_email=pick("ADMIN_EMAIL", "admin@example.com"),
        admin_password=pick("ADMIN_PASSWORD", "admin123"),
    )
