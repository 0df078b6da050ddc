"""Client for querying events from the connpass API."""
from __future__ import annotations

import logging
import threading
from typing import Any, Optional

import requests
from pydantic import ValidationError

from ingest.schemas import (
    CANCELLED,
    GATEWAY_TIMEOUT,
    HTTP_STATUS,
    MALFORMED,
    TRANSPORT,
    Event,
    PartitionKey,
    PartitionResult,
    ResultEnvelope,
)
from ingest.settings import DEFAULT_API_URL, Settings

logger = logging.getLogger(__name__)

USER_AGENT = "lunch-meetups/1.0"


class _PageFailed(Exception):
    """Internal signal that one page request could not be used."""

    def __init__(self, kind: str, detail: str, status_code: Optional[int] = None):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail
        self.status_code = status_code


class ConnpassClient:
    """Fetch one partition of events from connpass.

    The credential is fixed at construction; when it is absent requests are
    sent anonymously.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        api_key: Optional[str] = None,
        timeout: float = 30,
        max_pages: int = 1,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout
        self.max_pages = max_pages
        self._http = session or requests

    @classmethod
    def from_settings(cls, settings: Settings, session: Optional[requests.Session] = None) -> "ConnpassClient":
        return cls(
            api_url=settings.api_url,
            api_key=settings.api_key,
            timeout=settings.timeout_seconds,
            max_pages=settings.max_pages,
            session=session,
        )

    def _make_headers(self) -> dict[str, str]:
        """Return headers for API requests, including the API key if set."""
        headers: dict[str, str] = {"Accept": "application/json", "User-Agent": USER_AGENT}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    def _log_request(self, url: str, headers: dict[str, str], params: dict[str, Any]) -> None:
        """Log an outgoing request without leaking the API key."""
        logger.info("GET %s", url)
        logger.info("Header names: %s", sorted(headers))
        logger.info("Params: %s", params)

    def _parse_events(self, items: list[Any]) -> list[Event]:
        """Validate each event on its own so one bad record does not sink the page."""
        events = []
        for item in items:
            try:
                events.append(Event.model_validate(item))
            except ValidationError as exc:
                event_id = item.get("event_id", item.get("id")) if isinstance(item, dict) else None
                logger.warning("Skipping unusable event %s: %s", event_id, exc.errors()[0]["msg"])
        return events

    def _get_page(self, params: dict[str, str]) -> tuple[ResultEnvelope, int]:
        """Fetch one page; return its envelope and how many raw events it listed."""
        headers = self._make_headers()
        self._log_request(self.api_url, headers, params)
        try:
            response = self._http.get(self.api_url, params=params, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise _PageFailed(TRANSPORT, str(exc)) from exc

        if response.status_code == 504:
            raise _PageFailed(GATEWAY_TIMEOUT, "gateway timeout", 504)
        if not 200 <= response.status_code < 300:
            raise _PageFailed(HTTP_STATUS, f"{response.status_code} {response.reason}", response.status_code)

        try:
            payload = response.json()
        except ValueError as exc:
            raise _PageFailed(MALFORMED, f"response body is not JSON: {exc}") from exc
        if not isinstance(payload, dict) or not isinstance(payload.get("events"), list):
            raise _PageFailed(MALFORMED, "response body has no events list")

        try:
            envelope = ResultEnvelope.model_validate({**payload, "events": []})
        except ValidationError as exc:
            raise _PageFailed(MALFORMED, f"unusable result counters: {exc}") from exc
        items = payload["events"]
        return envelope.model_copy(update={"events": self._parse_events(items)}), len(items)

    def fetch_partition(self, key: PartitionKey, cancel: Optional[threading.Event] = None) -> PartitionResult:
        """Query connpass for ``key``.

        Args:
            key: Partition to query.
            cancel: When set before a page is requested, the partition is
                reported as cancelled instead.

        Returns:
            A :class:`PartitionResult` holding either the envelope (pages
            concatenated, counters recomputed) or the reason it failed.
        """
        params = key.params()
        events = []
        received = 0
        available = 0
        try:
            for page in range(self.max_pages):
                if cancel is not None and cancel.is_set():
                    return PartitionResult.failed(key, CANCELLED, "request cancelled")
                if page:
                    params["start"] = str(received + 1)
                envelope, listed = self._get_page(params)
                if page == 0:
                    available = envelope.results_available
                events.extend(envelope.events)
                received += listed
                if not listed or received >= available:
                    break
        except _PageFailed as exc:
            return PartitionResult.failed(key, exc.kind, exc.detail, exc.status_code)

        logger.info("Partition %s returned %d event(s)", key, len(events))
        return PartitionResult.success(key, ResultEnvelope.from_events(events, results_available=available))
