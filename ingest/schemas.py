"""Shared data models for the lunch events service."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Iterator, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from pipeline.utils import parse_timestamp

YMD = "ymd"
YM = "ym"
PARTITION_MODES = (YMD, YM)

# Failure kinds reported by the upstream client.
HTTP_STATUS = "http_status"
GATEWAY_TIMEOUT = "gateway_timeout"
TRANSPORT = "transport"
MALFORMED = "malformed"
CANCELLED = "cancelled"


@dataclass(frozen=True)
class DateRange:
    """Validated, inclusive calendar date range."""

    start: date
    end: date

    @property
    def span_days(self) -> int:
        return (self.end - self.start).days + 1

    def days(self) -> Iterator[date]:
        """Yield every date from ``start`` to ``end`` inclusive."""
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)


@dataclass(frozen=True)
class PartitionKey:
    """One upstream query: a batch of exact dates or a single year-month."""

    mode: str
    values: tuple[str, ...]

    @property
    def token(self) -> str:
        return ",".join(self.values)

    def params(self) -> dict[str, str]:
        """Return the upstream query parameters for this key."""
        if self.mode == YMD:
            return {"ymd": self.token, "prefecture": "online", "count": "100", "order": "2"}
        return {"ym": self.token, "count": "100"}

    def __str__(self) -> str:
        return f"{self.mode}={self.token}"


class EventGroup(BaseModel):
    """Community group an event belongs to.

    Known sub-fields are typed; anything else the upstream sends is kept in
    ``extra`` instead of being dropped or passed around untyped.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[int] = None
    subdomain: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    extra: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_extra(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known = {"id", "subdomain", "title", "url", "extra"}
        extra = dict(data.get("extra") or {})
        extra.update({k: v for k, v in data.items() if k not in known})
        cleaned = {k: v for k, v in data.items() if k in known}
        cleaned["extra"] = extra
        return cleaned


class Event(BaseModel):
    """A single meetup occurrence as published by connpass."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    event_id: int = Field(validation_alias=AliasChoices("event_id", "id"))
    title: str = ""
    catch: str = ""
    description: str = ""
    event_url: str = Field(default="", validation_alias=AliasChoices("event_url", "url"))
    started_at: str
    ended_at: str
    limit: Optional[int] = None
    hash_tag: str = ""
    place: Optional[str] = None
    address: Optional[str] = None
    lat: Optional[str] = None
    lon: Optional[str] = None
    owner_id: Optional[int] = None
    owner_nickname: Optional[str] = None
    owner_display_name: Optional[str] = None
    accepted: int = 0
    waiting: int = 0
    updated_at: Optional[str] = None
    group: Optional[EventGroup] = None

    @field_validator("title", "catch", "description", "event_url", "hash_tag", mode="before")
    @classmethod
    def _null_text_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("accepted", "waiting", mode="before")
    @classmethod
    def _null_count_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("started_at", "ended_at")
    @classmethod
    def _check_timestamp(cls, value: str) -> str:
        # Keep the upstream string untouched; only reject unparseable ones.
        parse_timestamp(value)
        return value

    @field_validator("lat", "lon", mode="before")
    @classmethod
    def _coordinate_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)):
            return str(value)
        return value


class ResultEnvelope(BaseModel):
    """Paged event listing, as returned upstream and to callers."""

    results_start: int = 1
    results_returned: int
    results_available: int
    events: List[Event] = Field(default_factory=list)

    @classmethod
    def from_events(
        cls, events: List[Event], results_available: Optional[int] = None
    ) -> "ResultEnvelope":
        """Build an envelope whose counters are computed from ``events``."""
        return cls(
            results_start=1,
            results_returned=len(events),
            results_available=len(events) if results_available is None else results_available,
            events=list(events),
        )


class ErrorResult(BaseModel):
    """Error body returned to callers instead of a ``ResultEnvelope``."""

    error: str


@dataclass(frozen=True)
class PartitionFailure:
    """Why a single partition query produced no events."""

    kind: str
    detail: str
    status_code: Optional[int] = None


@dataclass
class PartitionResult:
    """Outcome of querying one partition key; exactly one side is set."""

    key: PartitionKey
    envelope: Optional[ResultEnvelope] = None
    failure: Optional[PartitionFailure] = None

    def __post_init__(self) -> None:
        if (self.envelope is None) == (self.failure is None):
            raise ValueError("PartitionResult needs exactly one of envelope or failure")

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, key: PartitionKey, envelope: ResultEnvelope) -> "PartitionResult":
        return cls(key=key, envelope=envelope)

    @classmethod
    def failed(
        cls, key: PartitionKey, kind: str, detail: str, status_code: Optional[int] = None
    ) -> "PartitionResult":
        return cls(key=key, failure=PartitionFailure(kind=kind, detail=detail, status_code=status_code))


@dataclass
class MergeOutcome:
    """Events merged from every successful partition plus the failures."""

    events: List[Event] = field(default_factory=list)
    succeeded: List[PartitionKey] = field(default_factory=list)
    failed: List[PartitionResult] = field(default_factory=list)

    @property
    def total_failure(self) -> bool:
        return not self.succeeded

    @property
    def gateway_timeouts(self) -> List[PartitionKey]:
        return [r.key for r in self.failed if r.failure and r.failure.kind == GATEWAY_TIMEOUT]
