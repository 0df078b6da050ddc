"""Combine per-partition results into one event collection."""
from __future__ import annotations

import logging
from typing import Iterable

from ingest.schemas import MergeOutcome, PartitionResult

logger = logging.getLogger(__name__)


def merge_results(results: Iterable[PartitionResult]) -> MergeOutcome:
    """Concatenate events from successful partitions in partition order.

    Failed partitions are logged and left out. Events are not deduplicated,
    so an event returned by two partitions appears twice.
    """
    outcome = MergeOutcome()
    for result in results:
        if not result.ok:
            failure = result.failure
            logger.warning(
                "Partition %s failed (%s%s): %s",
                result.key,
                failure.kind,
                f" {failure.status_code}" if failure.status_code else "",
                failure.detail,
            )
            outcome.failed.append(result)
            continue
        outcome.succeeded.append(result.key)
        outcome.events.extend(result.envelope.events)

    logger.info(
        "Merged %d event(s) from %d partition(s); %d failed",
        len(outcome.events),
        len(outcome.succeeded),
        len(outcome.failed),
    )
    return outcome
