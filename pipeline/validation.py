"""Validate the ``start``/``end`` query parameters."""
from __future__ import annotations

import re
from datetime import date
from typing import Optional

from ingest.schemas import DateRange
from pipeline import messages
from pipeline.errors import RangeValidationError

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
DEFAULT_MAX_RANGE_DAYS = 32


def parse_date_range(
    start: Optional[str],
    end: Optional[str],
    max_range_days: int = DEFAULT_MAX_RANGE_DAYS,
    locale: Optional[str] = None,
) -> DateRange:
    """Turn raw query parameters into a :class:`DateRange`.

    Checks run in a fixed order and the first failure wins: presence,
    ``YYYY-MM-DD`` shape, calendar validity, ordering, then span.

    Raises:
        RangeValidationError: with the message to show the caller.
    """
    if not start or not end:
        raise RangeValidationError(messages.get_message(messages.MISSING_PARAMS, locale))

    if not DATE_PATTERN.fullmatch(start) or not DATE_PATTERN.fullmatch(end):
        raise RangeValidationError(messages.get_message(messages.BAD_FORMAT, locale))

    try:
        start_date = date.fromisoformat(start)
        end_date = date.fromisoformat(end)
    except ValueError:
        raise RangeValidationError(messages.get_message(messages.INVALID_DATE, locale)) from None

    if start_date > end_date:
        raise RangeValidationError(messages.get_message(messages.START_AFTER_END, locale))

    date_range = DateRange(start=start_date, end=end_date)
    if date_range.span_days > max_range_days:
        raise RangeValidationError(
            messages.get_message(messages.RANGE_TOO_LONG, locale, max_days=max_range_days)
        )
    return date_range
