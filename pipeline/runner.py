"""Orchestrate partitioning, fan-out, merge, filtering and fallback."""
from __future__ import annotations

import logging
import random
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel

from ingest.connpass_client import ConnpassClient
from ingest.schemas import (
    CANCELLED,
    DateRange,
    ErrorResult,
    Event,
    MergeOutcome,
    PartitionKey,
    PartitionResult,
    ResultEnvelope,
)
from ingest.settings import Settings
from pipeline import messages
from pipeline.errors import PipelineCancelled, RangeValidationError, UpstreamTimeout
from pipeline.fallback import generate_fallback_events
from pipeline.lunch_filter import filter_lunch_events, sort_by_start
from pipeline.merger import merge_results
from pipeline.partitioner import partition
from pipeline.validation import parse_date_range

logger = logging.getLogger(__name__)

PipelineResult = Union[ResultEnvelope, ErrorResult]


class LunchEventPipeline:
    """Collect lunchtime events for a date range from connpass."""

    def __init__(self, client: ConnpassClient, settings: Settings, rng: Optional[random.Random] = None):
        self.client = client
        self.settings = settings
        self.rng = rng

    def partitions(self, date_range: DateRange) -> List[PartitionKey]:
        return partition(date_range, self.settings.partition_mode, self.settings.ymd_batch_size)

    def fetch_all(self, keys: List[PartitionKey], cancel: Optional[threading.Event] = None) -> List[PartitionResult]:
        """Query every key concurrently; result ``i`` belongs to ``keys[i]``."""
        if not keys:
            return []
        cancel = cancel or threading.Event()
        workers = min(self.settings.max_workers, len(keys))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(self.client.fetch_partition, key, cancel) for key in keys]
            results = [future.result() for future in futures]

        if cancel.is_set() or any(r.failure and r.failure.kind == CANCELLED for r in results):
            raise PipelineCancelled("request cancelled while partitions were in flight")
        return results

    def query_upstream(self, date_range: DateRange, cancel: Optional[threading.Event] = None) -> MergeOutcome:
        """Partition, fetch and merge; raises :class:`UpstreamTimeout` on a 504."""
        keys = self.partitions(date_range)
        logger.info("Querying %d partition(s) for %s..%s", len(keys), date_range.start, date_range.end)
        outcome = merge_results(self.fetch_all(keys, cancel))
        if outcome.gateway_timeouts:
            raise UpstreamTimeout(", ".join(str(key) for key in outcome.gateway_timeouts))
        return outcome

    def fallback(self, date_range: DateRange) -> ResultEnvelope:
        """Serve synthetic events, filtered and sorted like real ones."""
        generated = generate_fallback_events(date_range, self.settings.timezone, self.rng)
        events = self._finish(generated)
        logger.info("Serving %d fallback event(s)", len(events))
        return ResultEnvelope.from_events(events)

    def _finish(self, events: List[Event]) -> List[Event]:
        return sort_by_start(filter_lunch_events(events), self.settings.timezone)

    def run(self, date_range: DateRange, cancel: Optional[threading.Event] = None) -> PipelineResult:
        """Return the sorted lunch events for ``date_range``.

        Falls back to synthetic events when every partition fails, when
        nothing survives the lunch filter, or when the upstream stage raises.
        A gateway timeout is reported as an :class:`ErrorResult`.
        """
        if self.settings.offline:
            logger.info("Offline mode, skipping connpass")
            return self.fallback(date_range)

        try:
            outcome = self.query_upstream(date_range, cancel)
        except UpstreamTimeout as exc:
            logger.warning("connpass gateway timeout for %s", exc)
            return ErrorResult(error=messages.get_message(messages.UPSTREAM_TIMEOUT, self.settings.locale))
        except PipelineCancelled:
            raise
        except Exception:
            logger.exception("Upstream stage failed, using fallback data")
            return self.fallback(date_range)

        if outcome.total_failure:
            logger.info("No partition succeeded, using fallback data")
            return self.fallback(date_range)

        events = self._finish(outcome.events)
        if not events:
            logger.info("No lunchtime events found, using fallback data")
            return self.fallback(date_range)

        return ResultEnvelope.from_events(events, results_available=len(outcome.events))

    def handle_request(
        self, start: Optional[str], end: Optional[str], cancel: Optional[threading.Event] = None
    ) -> Tuple[int, BaseModel]:
        """Validate raw parameters, run the pipeline and pick a status code."""
        locale = self.settings.locale
        try:
            date_range = parse_date_range(start, end, self.settings.max_range_days, locale)
        except RangeValidationError as exc:
            return exc.status_code, ErrorResult(error=exc.message)

        try:
            return 200, self.run(date_range, cancel)
        except PipelineCancelled:
            raise
        except Exception:
            logger.exception("Unexpected error for %s..%s", start, end)
            return 400, ErrorResult(error=messages.get_message(messages.UNEXPECTED, locale))


def build_pipeline(settings: Settings) -> LunchEventPipeline:
    """Wire a pipeline and its connpass client from ``settings``."""
    return LunchEventPipeline(ConnpassClient.from_settings(settings), settings)
