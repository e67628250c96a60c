"""
Layout Output Contracts

Geometry and semantic tags produced for the rendering collaborator.

DETERMINISTIC:
Same events + same day window + same config + same reference instant
= identical output (same order, same field values).
No paint instructions here - styling belongs to the renderer.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum
from typing import Optional, Tuple
import math

from .base import MINUTES_PER_DAY, LayoutWarning
from .config import GhostMode
from .events import EventKind


class ItemLayer(Enum):
    """Stacking layer of a rendered item."""
    BACKGROUND = "background"
    FOREGROUND = "foreground"


class ItemTone(Enum):
    """Semantic colour tag; the renderer maps it to a theme."""
    FEED = "feed"
    SLEEP = "sleep"
    PEE = "pee"
    POOP = "poop"
    BOTH = "both"


class ColumnMode(Enum):
    """WIDE for the selected day, NARROW for the compressed others."""
    WIDE = "wide"
    NARROW = "narrow"


# =============================================================================
# DAY WINDOW
# =============================================================================

@dataclass(frozen=True)
class DayWindow:
    """
    Half-open [start, end) range of one local calendar day.

    Derived from a reference date and a time zone, never stored.
    """
    day: date
    start: datetime
    end: datetime

    @classmethod
    def for_date(cls, day: date, tz: tzinfo) -> DayWindow:
        start = datetime.combine(day, time.min, tzinfo=tz)
        end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
        return cls(day=day, start=start, end=end)

    @property
    def tzinfo(self) -> tzinfo:
        return self.start.tzinfo

    def localize(self, instant: datetime) -> datetime:
        """Express an instant in this window's zone (naive means local)."""
        if instant.tzinfo is None:
            return instant.replace(tzinfo=self.tzinfo)
        return instant.astimezone(self.tzinfo)

    def same_day(self, instant: datetime) -> bool:
        return self.localize(instant).date() == self.day

    def minutes_from_start(self, instant: datetime) -> int:
        """Whole minutes elapsed since the window start, truncated toward zero."""
        delta = self.localize(instant) - self.start
        return math.trunc(delta.total_seconds() / 60)

    def shifted(self, days: int) -> DayWindow:
        return DayWindow.for_date(self.day + timedelta(days=days), self.tzinfo)


# =============================================================================
# LAYOUT ITEMS
# =============================================================================

@dataclass(frozen=True)
class LayoutItem:
    """
    One rendered event on a day column.

    start_minute/end_minute include the minimum-thickness floor and are
    what collision tests use. visible_end_minute is the clipped end before
    the floor; displayed durations come from it.
    """
    event_id: str
    kind: EventKind
    layer: ItemLayer
    tone: ItemTone
    start_minute: int
    end_minute: int
    visible_end_minute: int
    column_fraction: float = 100.0
    column_offset: float = 0.0
    label_anchor_percent: float = 50.0
    lane: int = 0
    cluster_index: Optional[int] = None
    magnitude: Optional[float] = None
    is_ongoing: bool = False

    @property
    def duration(self) -> int:
        return self.end_minute - self.start_minute

    @property
    def visible_duration(self) -> int:
        return max(0, self.visible_end_minute - self.start_minute)

    @property
    def duration_label(self) -> Optional[str]:
        if self.kind is not EventKind.SLEEP:
            return None
        return format_duration(self.visible_duration)

    def to_dict(self) -> dict:
        return {
            'event_id': self.event_id,
            'kind': self.kind.value,
            'layer': self.layer.value,
            'tone': self.tone.value,
            'start_minute': self.start_minute,
            'end_minute': self.end_minute,
            'visible_end_minute': self.visible_end_minute,
            'column_fraction': self.column_fraction,
            'column_offset': self.column_offset,
            'label_anchor_percent': self.label_anchor_percent,
            'lane': self.lane,
            'cluster_index': self.cluster_index,
            'magnitude': self.magnitude,
            'is_ongoing': self.is_ongoing,
            'duration_label': self.duration_label,
        }


@dataclass(frozen=True)
class Ghost:
    """A non-persisted forecast marker. Never written back as an Event."""
    time_minute: float
    mode: GhostMode
    predicted_magnitude: Optional[float] = None
    ordinal: Optional[int] = None

    @property
    def time_label(self) -> str:
        return format_clock(self.time_minute)

    def to_dict(self) -> dict:
        return {
            'time_minute': self.time_minute,
            'time_label': self.time_label,
            'mode': self.mode.value,
            'predicted_magnitude': self.predicted_magnitude,
            'ordinal': self.ordinal,
        }


# =============================================================================
# COLUMNS & VIEWS
# =============================================================================

@dataclass(frozen=True)
class DayLayout:
    """Fully calculated column for one day."""
    day: date
    mode: ColumnMode
    items: Tuple[LayoutItem, ...]
    ghosts: Tuple[Ghost, ...] = field(default_factory=tuple)
    warnings: Tuple[LayoutWarning, ...] = field(default_factory=tuple)
    feed_total: float = 0.0
    is_today: bool = False
    now_minute: Optional[int] = None

    def item(self, event_id: str) -> LayoutItem:
        for item in self.items:
            if item.event_id == event_id:
                return item
        raise KeyError(event_id)

    def to_dict(self) -> dict:
        return {
            'day': self.day.isoformat(),
            'mode': self.mode.value,
            'items': [i.to_dict() for i in self.items],
            'ghosts': [g.to_dict() for g in self.ghosts],
            'warnings': [w.to_dict() for w in self.warnings],
            'feed_total': self.feed_total,
            'is_today': self.is_today,
            'now_minute': self.now_minute,
        }


@dataclass(frozen=True)
class WeekView:
    """Seven day columns; exactly one of them is WIDE."""
    week_start: date
    selected_date: date
    columns: Tuple[DayLayout, ...]

    @property
    def selected(self) -> DayLayout:
        for column in self.columns:
            if column.day == self.selected_date:
                return column
        raise LookupError(f"{self.selected_date} not in week of {self.week_start}")

    def to_dict(self) -> dict:
        return {
            'week_start': self.week_start.isoformat(),
            'selected_date': self.selected_date.isoformat(),
            'columns': [c.to_dict() for c in self.columns],
        }


@dataclass(frozen=True)
class DailySummary:
    """Per-day totals for the summary screen."""
    day: date
    sleep_minutes: int
    feed_count: int
    feed_total: float
    pee_count: int
    poop_count: int

    @property
    def awake_minutes(self) -> int:
        return MINUTES_PER_DAY - self.sleep_minutes

    def to_dict(self) -> dict:
        return {
            'day': self.day.isoformat(),
            'sleep_minutes': self.sleep_minutes,
            'sleep_label': format_duration(self.sleep_minutes),
            'awake_minutes': self.awake_minutes,
            'feed_count': self.feed_count,
            'feed_total': self.feed_total,
            'pee_count': self.pee_count,
            'poop_count': self.poop_count,
        }


# =============================================================================
# DISPLAY HELPERS
# =============================================================================

def format_duration(minutes: int) -> str:
    """'7h 30m', '2h' or '45m'."""
    hours, mins = divmod(int(minutes), 60)
    if hours > 0:
        return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"
    return f"{mins}m"


def format_clock(minute_of_day: float) -> str:
    """'H:MM' for a minute-of-day value (fractions truncated)."""
    whole = int(minute_of_day)
    hours, mins = divmod(whole, 60)
    return f"{hours}:{mins:02d}"
