from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

from .config import Config


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 datetime string and normalize to UTC-naive datetime.

    - None / "" -> None
    - "YYYY-MM-DD" is midnight UTC
    - "YYYY-MM-DDTHH:MM" (naive) is interpreted as UTC
    - "...Z" or "...+/-HH:MM" is converted to UTC and tzinfo is stripped
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None

    # Accept trailing Z
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"

    dt = datetime.fromisoformat(s)

    # Normalize to UTC-naive
    if dt.tzinfo is None:
        return dt

    return dt.astimezone(timezone.utc).replace(tzinfo=None)


def parse_utc_offset(value: str) -> timezone:
    """
    "+05:30" / "-04:00" / "Z" -> a fixed-offset timezone.
    """
    s = value.strip()
    if s in ("Z", "z", ""):
        return timezone.utc
    sign = -1 if s[0] == "-" else 1
    hours, _, minutes = s.lstrip("+-").partition(":")
    return timezone(sign * timedelta(hours=int(hours), minutes=int(minutes or 0)))


def server_timezone() -> timezone:
    return parse_utc_offset(Config.SERVER_UTC_OFFSET)


def server_now() -> datetime:
    """Wall-clock now in the server timezone; the reference for expiry dates."""
    return datetime.now(server_timezone()).replace(tzinfo=None)


def parse_iso_date(value: Optional[str], tz: Optional[timezone] = None) -> Optional[date]:
    """
    Parse a calendar date from either "YYYY-MM-DD" or a full ISO-8601 datetime.

    The server sends DATE columns as its local midnight expressed in UTC
    ("2024-03-15" on a +05:30 host arrives as "2024-03-14T18:30:00.000Z"), so
    an offset-aware timestamp is moved into the server timezone (`tz`,
    default Config.SERVER_UTC_OFFSET) before the date is taken. Naive
    timestamps are already wall-clock and keep their date part.
    """
    if value is None:
        return None
    s = value.strip()
    if not s:
        return None
    if len(s) == 10:
        return date.fromisoformat(s)
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        return dt.date()
    return dt.astimezone(tz or server_timezone()).date()


def as_date(value: Union[date, datetime]) -> date:
    """Collapse a datetime to its calendar date; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """
    Serializes datetime to ISO-8601 with trailing 'Z'.
    If dt is naive, it is treated as UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt_utc = dt.astimezone(timezone.utc).replace(microsecond=0)
    return dt_utc.isoformat().replace("+00:00", "Z")


def to_iso_date(d: Optional[date]) -> Optional[str]:
    if d is None:
        return None
    return d.isoformat()
