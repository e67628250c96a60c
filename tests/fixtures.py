"""
Shared Fixtures

Factories for events and layout items. All times are explicit; nothing
reads the system clock.
"""

from __future__ import annotations
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from carelog.contracts.events import DiaperDetail, DiaperEvent, FeedEvent, SleepEvent
from carelog.contracts.events import EventKind
from carelog.contracts.layout import DayWindow, ItemLayer, ItemTone, LayoutItem

UTC = ZoneInfo("UTC")

# A Tuesday; its week starts Monday 2024-03-11.
DAY = date(2024, 3, 12)
SUBJECT = "baby_1"


def at(hhmm: str, day: date = DAY, offset_days: int = 0, tz=timezone.utc) -> datetime:
    """Instant at HH:MM on `day` (+ offset_days)."""
    hours, minutes = (int(p) for p in hhmm.split(":"))
    return datetime.combine(day + timedelta(days=offset_days), time(hours, minutes), tzinfo=tz)


def window(day: date = DAY) -> DayWindow:
    return DayWindow.for_date(day, UTC)


def feed(event_id: str, start: datetime, magnitude: Optional[float] = None,
         subject_id: str = SUBJECT) -> FeedEvent:
    return FeedEvent(event_id=event_id, subject_id=subject_id, start_instant=start, magnitude=magnitude)


def sleep(event_id: str, start: datetime, end: Optional[datetime] = None,
          subject_id: str = SUBJECT) -> SleepEvent:
    return SleepEvent(event_id=event_id, subject_id=subject_id, start_instant=start, end_instant=end)


def diaper(event_id: str, start: datetime, detail: DiaperDetail = DiaperDetail.PEE,
           subject_id: str = SUBJECT) -> DiaperEvent:
    return DiaperEvent(event_id=event_id, subject_id=subject_id, start_instant=start, detail=detail)


def point_item(event_id: str, start: int, end: Optional[int] = None) -> LayoutItem:
    """Foreground item spanning [start, end) minutes (default 15 long)."""
    end = start + 15 if end is None else end
    return LayoutItem(
        event_id=event_id, kind=EventKind.FEED, layer=ItemLayer.FOREGROUND,
        tone=ItemTone.FEED, start_minute=start, end_minute=end, visible_end_minute=start,
    )


def span_item(event_id: str, start: int, end: int) -> LayoutItem:
    """Background sleep span over [start, end] minutes."""
    return LayoutItem(
        event_id=event_id, kind=EventKind.SLEEP, layer=ItemLayer.BACKGROUND,
        tone=ItemTone.SLEEP, start_minute=start, end_minute=end, visible_end_minute=end,
    )
