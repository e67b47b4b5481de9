from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

DEFAULT_BASE_URL = "http://localhost:3001"
DEFAULT_TYPES = "city,state,country"
MIN_TIMEOUT_SEC = 1.0


def _safe_float(val: Any, default: float) -> float:
    try:
        return float(val)
    except (TypeError, ValueError):
        return default


def _safe_int(val: Any, default: int) -> int:
    try:
        int_val = int(val)
        return int_val if int_val > 0 else default
    except (TypeError, ValueError):
        return default


def _safe_bool(val: Any, default: bool) -> bool:
    if isinstance(val, bool):
        return val
    if isinstance(val, str):
        lowered = val.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
    return default


def get_config(secrets: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Read settings from a secrets mapping (``st.secrets`` in the app)."""
    secrets = secrets or {}

    configured_timeout_sec = _safe_float(secrets.get("PLACES_TIMEOUT_SEC", 5), 5.0)
    return {
        "base_url": str(secrets.get("PLACES_API_BASE_URL", DEFAULT_BASE_URL)).rstrip("/"),
        "configured_timeout_sec": configured_timeout_sec,
        "timeout_sec": max(configured_timeout_sec, MIN_TIMEOUT_SEC),
        "min_chars": _safe_int(secrets.get("PLACES_MIN_CHARS", 2), 2),
        "debounce_ms": _safe_int(secrets.get("PLACES_DEBOUNCE_MS", 200), 200),
        "max_results": _safe_int(secrets.get("PLACES_MAX_RESULTS", 8), 8),
        "types": str(secrets.get("PLACES_TYPES", DEFAULT_TYPES)),
        "allow_free_text": _safe_bool(secrets.get("PLACES_ALLOW_FREE_TEXT", True), True),
        "log_level": str(secrets.get("LOG_LEVEL", "INFO")).upper(),
    }


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
