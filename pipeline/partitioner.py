"""Split a date range into connpass-legal query keys."""
from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List

from ingest.schemas import PARTITION_MODES, YM, YMD, DateRange, PartitionKey
from pipeline.utils import compact_date, compact_month

# connpass accepts several ``ymd`` values per request; keep batches small
# enough that a 100-event page still covers each batch.
DEFAULT_YMD_BATCH_SIZE = 4


def partition_by_day(date_range: DateRange, batch_size: int = DEFAULT_YMD_BATCH_SIZE) -> List[PartitionKey]:
    """Group every date in ``date_range`` into ``ymd`` batches of ``batch_size``."""
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")

    tokens = [compact_date(day) for day in date_range.days()]
    return [
        PartitionKey(mode=YMD, values=tuple(tokens[i:i + batch_size]))
        for i in range(0, len(tokens), batch_size)
    ]


def partition_by_month(date_range: DateRange) -> List[PartitionKey]:
    """Return one ``ym`` key for each month touched by ``date_range``."""
    keys: List[PartitionKey] = []
    year, month = date_range.start.year, date_range.start.month
    last = (date_range.end.year, date_range.end.month)
    while (year, month) <= last:
        keys.append(PartitionKey(mode=YM, values=(compact_month(year, month),)))
        month += 1
        if month > 12:
            month = 1
            year += 1
    return keys


def partition(
    date_range: DateRange, mode: str = YMD, batch_size: int = DEFAULT_YMD_BATCH_SIZE
) -> List[PartitionKey]:
    """Partition ``date_range`` using the requested query mode."""
    if mode == YMD:
        return partition_by_day(date_range, batch_size)
    if mode == YM:
        return partition_by_month(date_range)
    raise ValueError(f"Unknown partition mode {mode!r}; expected one of {PARTITION_MODES}")


def decode_dates(keys: Iterable[PartitionKey]) -> List[date]:
    """Expand ``ymd`` keys back into the dates they cover, in key order."""
    days: List[date] = []
    for key in keys:
        if key.mode != YMD:
            raise ValueError(f"Cannot decode exact dates from {key}")
        days.extend(datetime.strptime(token, "%Y%m%d").date() for token in key.values)
    return days
