import os
import sys

import pytest

# Ensure the project root is on the import path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from ingest.schemas import Event
from ingest.settings import Settings

API_URL = "https://connpass.example/api/v2/events/"


def _payload(event_id=1, started_at="2024-06-03T12:00:00+09:00", ended_at="2024-06-03T13:00:00+09:00", **extra):
    data = {
        "event_id": event_id,
        "title": f"Lunch LT #{event_id}",
        "catch": "",
        "description": "Lightning talks over lunch",
        "event_url": f"https://connpass.com/event/{event_id}/",
        "started_at": started_at,
        "ended_at": ended_at,
        "limit": 50,
        "hash_tag": "lunchlt",
        "place": "オンライン",
        "address": "",
        "lat": None,
        "lon": None,
        "owner_id": 99,
        "owner_nickname": "organizer",
        "owner_display_name": "Organizer",
        "accepted": 10,
        "waiting": 0,
        "updated_at": "2024-05-20T10:00:00+09:00",
    }
    data.update(extra)
    return data


@pytest.fixture
def event_payload():
    """Factory for raw connpass event dictionaries."""
    return _payload


@pytest.fixture
def make_event():
    """Factory for parsed :class:`Event` objects."""
    def _make(event_id=1, started_at="2024-06-03T12:00:00+09:00", ended_at="2024-06-03T13:00:00+09:00", **extra):
        return Event.model_validate(_payload(event_id, started_at, ended_at, **extra))
    return _make


@pytest.fixture
def envelope_payload():
    """Factory for a connpass response body around some event payloads."""
    def _make(events, results_available=None, results_start=1):
        return {
            "results_start": results_start,
            "results_returned": len(events),
            "results_available": len(events) if results_available is None else results_available,
            "events": events,
        }
    return _make


@pytest.fixture
def settings():
    return Settings(api_url=API_URL, api_key=None, timeout_seconds=5, max_workers=4)
