from typing import Dict, Iterable, List, Optional


def ensure_positive_int(value: int, field: str) -> int:
    if value is None or int(value) < 1:
        raise ValueError(f"{field} must be >= 1")
    return int(value)


def parse_int(value: Optional[str], default: int = 0) -> int:
    """Lenient integer parsing for query-string values."""
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default


def missing_fields(payload: Dict, required: Iterable[str]) -> List[str]:
    """Return required keys whose value is absent or blank."""
    return [name for name in required if not str(payload.get(name) or "").strip()]
