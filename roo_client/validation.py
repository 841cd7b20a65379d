# roo_client/validation.py
"""
Coercion helpers used by the record normalizers.

The backend is a MySQL/Express service that serializes DECIMAL columns as
strings, TINYINT flags as 0/1 and DATE columns as midnight timestamps, so
nothing coming off the wire is trusted to have its nominal JSON type.

Policy:
- required identity fields: missing / null / non-scalar -> MalformedResponse
- optional fields: missing / null -> None (or the caller's default)
- optional fields present but untypeable -> None (or the default), logged at
  WARNING; one bad cell never costs the caller the whole record or list
"""
from __future__ import annotations

import logging
import math
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from .errors import MalformedResponse
from .time_utils import parse_iso_date, parse_iso_datetime

log = logging.getLogger(__name__)

_TRUE_STRINGS = {"1", "true", "yes", "y", "t"}
_FALSE_STRINGS = {"0", "false", "no", "n", "f", ""}


def require_mapping(raw: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise MalformedResponse(f"{kind} must be a JSON object, got {type(raw).__name__}")
    return raw


def require_id(raw: Mapping[str, Any], key: str, kind: str) -> str:
    """Identity fields are normalized to str; ints are accepted (MySQL AUTO_INCREMENT)."""
    value = raw.get(key)
    if value is None:
        raise MalformedResponse(f"{kind}.{key} is required")
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise MalformedResponse(f"{kind}.{key} must be a string or integer id")
    text = str(value).strip()
    if not text:
        raise MalformedResponse(f"{kind}.{key} cannot be blank")
    return text


def _untypeable(key: str, value: Any, expected: str) -> None:
    log.warning("Ignoring %s=%r: expected %s", key, value, expected)
    return None


def opt_str(raw: Mapping[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        return _untypeable(key, value, "a string")
    text = str(value).strip()
    return text or None


def text(raw: Mapping[str, Any], key: str, default: str = "") -> str:
    value = opt_str(raw, key)
    return default if value is None else value


def opt_int(raw: Mapping[str, Any], key: str) -> Optional[int]:
    value = raw.get(key)
    if value is None:
        return None

    if isinstance(value, bool):
        return _untypeable(key, value, "an integer")
    if isinstance(value, int):
        return value
    # MySQL SUM() comes back as "12" or 12.0
    if isinstance(value, float):
        if not value.is_integer():
            return _untypeable(key, value, "an integer")
        return int(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            number = Decimal(stripped)
        except InvalidOperation:
            return _untypeable(key, value, "an integer")
        if not number.is_finite() or number != number.to_integral_value():
            return _untypeable(key, value, "an integer")
        return int(number)
    return _untypeable(key, value, "an integer")


def non_negative_int(raw: Mapping[str, Any], key: str, default: int = 0) -> int:
    """Counts and stock levels; negatives from the wire are clamped to zero."""
    value = opt_int(raw, key)
    if value is None:
        return default
    return max(value, 0)


def opt_decimal(raw: Mapping[str, Any], key: str) -> Optional[Decimal]:
    value = raw.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        return _untypeable(key, value, "a number")
    if isinstance(value, (int, Decimal)):
        return Decimal(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return _untypeable(key, value, "a finite number")
        # via str() so 12.5 does not become 12.4999...
        return Decimal(str(value))
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        try:
            number = Decimal(stripped)
        except InvalidOperation:
            return _untypeable(key, value, "a number")
        if not number.is_finite():
            return _untypeable(key, value, "a finite number")
        return number
    return _untypeable(key, value, "a number")


def flag(raw: Mapping[str, Any], key: str, default: bool = False) -> bool:
    value = raw.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
    _untypeable(key, value, "a boolean")
    return default


def opt_date(raw: Mapping[str, Any], key: str) -> Optional[date]:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        return _untypeable(key, value, "an ISO-8601 date")
    try:
        return parse_iso_date(value)
    except ValueError:
        return _untypeable(key, value, "an ISO-8601 date")


def opt_datetime(raw: Mapping[str, Any], key: str):
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        return _untypeable(key, value, "an ISO-8601 datetime")
    try:
        return parse_iso_datetime(value)
    except ValueError:
        return _untypeable(key, value, "an ISO-8601 datetime")
