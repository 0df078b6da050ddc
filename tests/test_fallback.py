import random
from datetime import date

from ingest.schemas import DateRange
from pipeline.fallback import FALLBACK_OWNER_ID, generate_fallback_events
from pipeline.lunch_filter import filter_lunch_events, sort_by_start
from pipeline.utils import parse_timestamp


def test_one_event_per_weekday():
    # 2024-06-03 is a Monday; the 8th and 9th are a weekend.
    events = generate_fallback_events(DateRange(date(2024, 6, 3), date(2024, 6, 10)), rng=random.Random(1))
    days = [parse_timestamp(e.started_at).date() for e in events]
    assert days == [date(2024, 6, d) for d in (3, 4, 5, 6, 7, 10)]


def test_weekend_only_range_is_empty():
    assert generate_fallback_events(DateRange(date(2024, 6, 1), date(2024, 6, 2))) == []


def test_events_span_lunch_hour_in_zone():
    [event] = generate_fallback_events(DateRange(date(2024, 6, 3), date(2024, 6, 3)), tz="Asia/Tokyo")
    assert event.started_at == "2024-06-03T12:00:00+09:00"
    assert event.ended_at == "2024-06-03T13:00:00+09:00"
    assert event.owner_id == FALLBACK_OWNER_ID
    assert event.title == "ランチタイム勉強会: 2024-06-03"
    assert event.event_url == "https://connpass.com/event/dummy-2024-06-03/"


def test_headcounts_and_ids_are_bounded():
    rng = random.Random(42)
    events = generate_fallback_events(DateRange(date(2024, 6, 3), date(2024, 7, 3)), rng=rng)
    assert events
    for event in events:
        assert 0 <= event.event_id < 100000
        assert 0 <= event.accepted < 30
        assert 0 <= event.waiting < 10


def test_fallback_events_pass_filter_and_sort_unchanged():
    events = generate_fallback_events(DateRange(date(2024, 6, 3), date(2024, 6, 14)), rng=random.Random(3))
    assert filter_lunch_events(events) == events
    assert sort_by_start(events) == events
