"""
Validation helpers for the partially-typed event and announcement records.

Each record has a few typed fields; whatever else the client sends goes into a
bounded extension map of scalar values.
"""

import math
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Tuple

MAX_EXTRA_FIELDS = 20
MAX_EXTRA_KEY_LENGTH = 64
MAX_EXTRA_STRING_LENGTH = 2000

# BSON stores integers as signed 64-bit
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class ValidationError(ValueError):
    """Raised when a submitted payload fails validation. The message is client-safe."""


def parse_dt(val: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 or datetime-local string.

    Accepts 'YYYY-MM-DD', 'YYYY-MM-DDTHH:MM' and a trailing 'Z'.
    Returns None when the value is missing or unparseable.
    """
    if not val or not isinstance(val, str):
        return None
    try:
        if val.endswith("Z"):
            val = val[:-1] + "+00:00"
        return datetime.fromisoformat(val)
    except (ValueError, TypeError):
        return None


def require_string(data: Dict[str, Any], key: str, max_length: int) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} is required")
    value = value.strip()
    if len(value) > max_length:
        raise ValidationError(f"{key} must be {max_length} characters or less")
    return value


def optional_string(data: Dict[str, Any], key: str, max_length: int) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    if len(value) > max_length:
        raise ValidationError(f"{key} must be {max_length} characters or less")
    return value


def _is_scalar(value: Any) -> bool:
    if value is None or isinstance(value, (str, bool)):
        return True
    if isinstance(value, int):
        return INT64_MIN <= value <= INT64_MAX
    if isinstance(value, float):
        return math.isfinite(value)
    return False


def extract_extra_fields(data: Dict[str, Any], known: Iterable[str]) -> Dict[str, Any]:
    """
    Collect the fields not in `known`, enforcing the extension map bounds.

    Keys must be short, must not start with "$" or contain "." or a NUL byte, and
    values must be scalars: 64-bit integers, finite floats, strings, booleans or null.
    """
    known = set(known)
    extra = {k: v for k, v in data.items() if k not in known}

    if len(extra) > MAX_EXTRA_FIELDS:
        raise ValidationError(f"At most {MAX_EXTRA_FIELDS} additional fields are allowed")

    for key, value in extra.items():
        if not key or len(key) > MAX_EXTRA_KEY_LENGTH or key.startswith("$") or "." in key or "\x00" in key:
            raise ValidationError(f"Invalid field name: {key[:MAX_EXTRA_KEY_LENGTH]}")
        if not _is_scalar(value):
            raise ValidationError(f"{key} must be a string, 64-bit integer, finite number, boolean or null")
        if isinstance(value, str) and len(value) > MAX_EXTRA_STRING_LENGTH:
            raise ValidationError(f"{key} must be {MAX_EXTRA_STRING_LENGTH} characters or less")

    return extra


def ensure_object(data: Any) -> Tuple[Dict[str, Any], Optional[str]]:
    """Make sure the request body is a JSON object."""
    if data is None:
        return {}, None
    if not isinstance(data, dict):
        return {}, "Request body must be a JSON object"
    return data, None
