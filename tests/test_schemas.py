import pytest
from pydantic import ValidationError

from ingest.schemas import (
    HTTP_STATUS,
    YM,
    YMD,
    Event,
    PartitionKey,
    PartitionResult,
    ResultEnvelope,
)


def test_group_keeps_unknown_fields_in_extra(event_payload):
    event = Event.model_validate(event_payload(
        1,
        group={"id": 5, "subdomain": "lunchlt", "title": "Lunch LT", "url": "https://lunchlt.connpass.com/", "logo": "x.png"},
    ))
    assert event.group.subdomain == "lunchlt"
    assert event.group.extra == {"logo": "x.png"}


def test_unknown_top_level_fields_are_ignored(event_payload):
    event = Event.model_validate(event_payload(1, open_status="open"))
    assert not hasattr(event, "open_status")


def test_numeric_coordinates_become_text(event_payload):
    event = Event.model_validate(event_payload(1, lat=35.68, lon=139.76))
    assert event.lat == "35.68"
    assert event.lon == "139.76"


def test_unparseable_timestamp_rejected(event_payload):
    with pytest.raises(ValidationError):
        Event.model_validate(event_payload(1, ended_at="lunchtime"))


def test_envelope_from_events_counts(make_event):
    envelope = ResultEnvelope.from_events([make_event(1), make_event(2)], results_available=10)
    assert envelope.results_returned == 2
    assert envelope.results_available == 10
    assert ResultEnvelope.from_events([]).results_returned == 0


def test_partition_result_holds_exactly_one_side():
    key = PartitionKey(YMD, ("20240603",))
    with pytest.raises(ValueError):
        PartitionResult(key=key)
    failed = PartitionResult.failed(key, HTTP_STATUS, "500", 500)
    assert not failed.ok


def test_partition_key_rendering():
    key = PartitionKey(YM, ("202406",))
    assert key.token == "202406"
    assert str(key) == "ym=202406"


def test_null_text_and_counts_become_defaults(event_payload):
    event = Event.model_validate(event_payload(1, title=None, catch=None, hash_tag=None, accepted=None))
    assert event.title == ""
    assert event.catch == ""
    assert event.hash_tag == ""
    assert event.accepted == 0


def test_v2_id_and_url_names(event_payload):
    raw = event_payload(8)
    raw["id"] = raw.pop("event_id")
    raw["url"] = raw.pop("event_url")
    event = Event.model_validate(raw)
    assert event.event_id == 8
    assert event.event_url == "https://connpass.com/event/8/"
    # Callers always see the field names.
    dumped = event.model_dump()
    assert dumped["event_id"] == 8
    assert "id" not in dumped
