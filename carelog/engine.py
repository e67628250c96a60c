"""
Engine Orchestration Module

Unified, stateless interface over the timeline layers.

DESIGN PRINCIPLES:
==================
1. Pure function of (events, subject_id, day, config, reference_now)
2. No hidden layout state; every call recomputes from scratch
3. Layers communicate only through contracts
4. A bad record degrades to a default, it never blanks the column

LAYER FLOW:
===========
WIDE column:   normalize -> pack foreground -> place span labels -> ghosts
NARROW column: normalize -> pack foreground -> assign lanes
"""

from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple
import logging

from .contracts.config import TimelineConfig
from .contracts.events import BaseEvent
from .contracts.layout import ColumnMode, DailySummary, DayLayout, DayWindow, Ghost, WeekView
from .temporal.normalizer import DayWindowNormalizer, NormalizedDay
from .layout.packing import ColumnPacker
from .layout.labels import SpanLabelPlacer
from .layout.lanes import LaneAssigner
from .prediction.ghosts import GhostGenerator
from .summary import DailySummarizer, feed_total_for_day

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7


class TimelineEngine:
    """
    Timeline Layout & Prediction Engine.

    Safe to re-invoke on every clock tick or data refresh: identical
    inputs produce identical outputs, and nothing is cached between calls.
    """

    def __init__(self, config: Optional[TimelineConfig] = None):
        self._config = config or TimelineConfig()
        self._tz = self._config.tzinfo

        self._normalizer = DayWindowNormalizer(self._config.min_span_minutes)
        self._packer = ColumnPacker(self._config.column_tolerance_ratio)
        self._labels = SpanLabelPlacer(self._config.label_exclusion_radius)
        self._lanes = LaneAssigner(self._config.lane_proximity_minutes)
        self._ghosts = GhostGenerator(self._config)
        self._summarizer = DailySummarizer()

    @property
    def config(self) -> TimelineConfig:
        return self._config

    def window_for(self, day: date) -> DayWindow:
        return DayWindow.for_date(day, self._tz)

    # =========================================================================
    # DAY COLUMNS
    # =========================================================================

    def normalize_day(
        self,
        events: Iterable[BaseEvent],
        subject_id: Optional[str],
        day: date,
        reference_now: datetime
    ) -> NormalizedDay:
        return self._normalizer.normalize_day(
            events, self.window_for(day), reference_now, subject_id=subject_id
        )

    def layout_day(
        self,
        events: Iterable[BaseEvent],
        subject_id: Optional[str],
        day: date,
        reference_now: datetime,
        mode: ColumnMode = ColumnMode.WIDE
    ) -> DayLayout:
        """
        Lay out one day column.

        Items are ordered background spans first (by start), then
        foreground items cluster by cluster in packing order.
        """
        events = tuple(events)
        window = self.window_for(day)
        normalized = self._normalizer.normalize_day(events, window, reference_now, subject_id=subject_id)

        foreground = self._packer.pack(normalized.foreground)
        background = list(normalized.background)
        ghosts: Tuple[Ghost, ...] = ()

        if mode is ColumnMode.WIDE:
            background = self._labels.place(background, foreground)
            ghosts = self._ghosts.ghosts_for_day(events, subject_id, window, reference_now)
            items = background + foreground
        else:
            items = self._lanes.assign(background + foreground)

        is_today = window.same_day(reference_now)
        now_minute = window.minutes_from_start(reference_now) if is_today else None

        logger.debug(
            "Laid out %s (%s): %d items, %d ghosts, %d warnings",
            day.isoformat(), mode.value, len(items), len(ghosts), len(normalized.warnings)
        )
        return DayLayout(
            day=day,
            mode=mode,
            items=tuple(items),
            ghosts=ghosts,
            warnings=normalized.warnings,
            feed_total=feed_total_for_day(events, subject_id, window),
            is_today=is_today,
            now_minute=now_minute,
        )

    def ghosts_for_day(
        self,
        events: Iterable[BaseEvent],
        subject_id: Optional[str],
        day: date,
        reference_now: datetime
    ) -> Tuple[Ghost, ...]:
        return self._ghosts.ghosts_for_day(tuple(events), subject_id, self.window_for(day), reference_now)

    def summarize_day(
        self,
        events: Iterable[BaseEvent],
        subject_id: Optional[str],
        day: date,
        reference_now: datetime
    ) -> DailySummary:
        return self._summarizer.summarize(events, subject_id, self.window_for(day), reference_now)

    # =========================================================================
    # WEEK VIEW
    # =========================================================================

    def week_containing(self, day: date) -> date:
        """First day of the week holding `day`."""
        back = (day.weekday() - self._config.week_starts_on) % DAYS_PER_WEEK
        return day - timedelta(days=back)

    def shift_week(self, week_start: date, selected: date, weeks: int) -> Tuple[date, date]:
        """
        Move the week by `weeks` and keep the selected weekday offset.

        Returns (new_week_start, new_selected), the offset clamped to 0..6.
        """
        new_start = week_start + timedelta(weeks=weeks)
        offset = max(0, min(DAYS_PER_WEEK - 1, (selected - week_start).days))
        return new_start, new_start + timedelta(days=offset)

    def build_week(
        self,
        events: Iterable[BaseEvent],
        subject_id: Optional[str],
        selected_date: date,
        reference_now: datetime
    ) -> WeekView:
        """Seven columns; the selected day WIDE, the others NARROW."""
        events = tuple(events)
        week_start = self.week_containing(selected_date)

        columns: List[DayLayout] = []
        for offset in range(DAYS_PER_WEEK):
            day = week_start + timedelta(days=offset)
            mode = ColumnMode.WIDE if day == selected_date else ColumnMode.NARROW
            columns.append(self.layout_day(events, subject_id, day, reference_now, mode))

        return WeekView(week_start=week_start, selected_date=selected_date, columns=tuple(columns))
