"""Date and timestamp helpers shared by the pipeline stages."""
from __future__ import annotations

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE = "Asia/Tokyo"


def parse_timestamp(value: str) -> datetime:
    """Parse an upstream timestamp string.

    Accepts ISO 8601 with either ``T`` or a space between date and time,
    with or without a UTC offset. The wall-clock fields of the result are
    exactly those written in ``value``; no timezone conversion happens.

    Raises
    ------
    ValueError
        If ``value`` is not a string or is not a recognizable timestamp.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Invalid timestamp: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def sort_key(value: str, tz: str | None = None) -> datetime:
    """Return an aware datetime usable for ordering mixed timestamps.

    Naive timestamps are read as wall-clock time in ``tz`` (default
    ``Asia/Tokyo``) so they compare with offset-carrying ones.
    """
    dt = parse_timestamp(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=ZoneInfo(tz or DEFAULT_TIMEZONE))
    return dt


def to_iso_datetime(day: date, at: time, tz: str | None = None) -> str:
    """Return ``day`` at ``at`` in ``tz`` as an ISO 8601 string with offset."""
    zone = ZoneInfo(tz or DEFAULT_TIMEZONE)
    return datetime.combine(day, at, tzinfo=zone).isoformat()


def compact_date(day: date) -> str:
    """Render ``day`` as ``YYYYMMDD``."""
    return day.strftime("%Y%m%d")


def compact_month(year: int, month: int) -> str:
    """Render a year-month as ``YYYYMM``."""
    return f"{year:04d}{month:02d}"
