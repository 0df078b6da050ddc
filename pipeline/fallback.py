"""Synthetic lunch events served when connpass gives us nothing usable."""
from __future__ import annotations

import random
from datetime import datetime, time
from typing import List, Optional
from zoneinfo import ZoneInfo

from ingest.schemas import DateRange, Event
from pipeline.utils import DEFAULT_TIMEZONE, to_iso_datetime

FALLBACK_OWNER_ID = 12345
FALLBACK_OWNER_NICKNAME = "lunch_organizer"
FALLBACK_OWNER_DISPLAY_NAME = "ランチ勉強会運営"
FALLBACK_LIMIT = 30

FALLBACK_DESCRIPTION = """
# ランチタイム勉強会

平日のランチタイムに気軽に参加できる勉強会です。
お弁当を食べながら、最新の技術トレンドについて話し合いましょう。

## 対象者
- エンジニア
- デザイナー
- プロダクトマネージャー

## 持ち物
- お弁当（各自でご用意ください）
- PC（必要に応じて）
""".strip()


def generate_fallback_events(
    date_range: DateRange,
    tz: str | None = None,
    rng: Optional[random.Random] = None,
) -> List[Event]:
    """Create one 12:00-13:00 placeholder event for each weekday in range.

    Args:
        date_range: Inclusive range to cover. Saturdays and Sundays are skipped.
        tz: IANA timezone the events are authored in (default Asia/Tokyo).
        rng: Random source for ids and headcounts; pass a seeded one in tests.

    Returns:
        Events in calendar order.
    """
    rng = rng or random.Random()
    zone = tz or DEFAULT_TIMEZONE
    updated_at = datetime.now(ZoneInfo(zone)).replace(microsecond=0).isoformat()

    events: List[Event] = []
    for day in date_range.days():
        if day.weekday() >= 5:
            continue
        label = day.isoformat()
        events.append(
            Event(
                event_id=rng.randrange(100000),
                title=f"ランチタイム勉強会: {label}",
                catch="平日のランチタイムに気軽に参加できる勉強会です",
                description=FALLBACK_DESCRIPTION,
                event_url=f"https://connpass.com/event/dummy-{label}/",
                started_at=to_iso_datetime(day, time(12, 0, 0), zone),
                ended_at=to_iso_datetime(day, time(13, 0, 0), zone),
                limit=FALLBACK_LIMIT,
                hash_tag="ランチタイム勉強会",
                place="オンライン",
                address="",
                lat="",
                lon="",
                owner_id=FALLBACK_OWNER_ID,
                owner_nickname=FALLBACK_OWNER_NICKNAME,
                owner_display_name=FALLBACK_OWNER_DISPLAY_NAME,
                accepted=rng.randrange(30),
                waiting=rng.randrange(10),
                updated_at=updated_at,
            )
        )
    return events
