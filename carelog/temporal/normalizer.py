"""
Day Window Normalizer
=====================

Decides which events belong to a day column and maps them onto the
column's minute axis [0, 1440].

INCLUSION:
- Interval events (sleep): start < day_end AND effective_end > day_start,
  where effective_end = end_instant, or reference_now while ongoing
- Point events (feed, diaper): local calendar date equals the window's date

CLIPPING:
- start_minute = max(0, minutes(day_start -> start))
- visible_end_minute = min(1440, minutes(day_start -> effective_end)),
  never before start_minute
- end_minute = visible_end_minute raised to start_minute + min_span,
  then capped at 1440
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Tuple
import logging

from ..contracts.base import MINUTES_PER_DAY, ErrorCode, LayoutWarning
from ..contracts.events import BaseEvent, DiaperDetail, DiaperEvent, EventKind, FeedEvent, SleepEvent
from ..contracts.layout import DayWindow, ItemLayer, ItemTone, LayoutItem

logger = logging.getLogger(__name__)


_DIAPER_TONES = {
    DiaperDetail.PEE: ItemTone.PEE,
    DiaperDetail.POOP: ItemTone.POOP,
    DiaperDetail.BOTH: ItemTone.BOTH,
    DiaperDetail.UNKNOWN: ItemTone.BOTH,
}


@dataclass(frozen=True)
class NormalizedDay:
    """Items of one day column before packing, in start order."""
    window: DayWindow
    items: Tuple[LayoutItem, ...]
    warnings: Tuple[LayoutWarning, ...] = field(default_factory=tuple)

    @property
    def background(self) -> Tuple[LayoutItem, ...]:
        return tuple(i for i in self.items if i.layer is ItemLayer.BACKGROUND)

    @property
    def foreground(self) -> Tuple[LayoutItem, ...]:
        return tuple(i for i in self.items if i.layer is ItemLayer.FOREGROUND)


class DayWindowNormalizer:
    """Clip events onto a single day's minute axis."""

    def __init__(self, min_span_minutes: int = 15):
        self._min_span = min_span_minutes

    # =========================================================================
    # INCLUSION
    # =========================================================================

    def effective_end(
        self,
        event: BaseEvent,
        window: DayWindow,
        reference_now: datetime
    ) -> Tuple[datetime, bool]:
        """
        End instant used for inclusion and clipping, localized to the window.

        Point events end where they start. A sleep ending before it starts
        is treated as zero-length; the flag reports that clamp.
        """
        start = window.localize(event.start_instant)
        if not isinstance(event, SleepEvent):
            return start, False
        end = window.localize(event.end_instant if event.end_instant is not None else reference_now)
        if end < start:
            return start, event.end_instant is not None
        return end, False

    def includes(self, event: BaseEvent, window: DayWindow, reference_now: datetime) -> bool:
        if isinstance(event, SleepEvent):
            start = window.localize(event.start_instant)
            end, _ = self.effective_end(event, window, reference_now)
            return start < window.end and end > window.start
        return window.same_day(event.start_instant)

    # =========================================================================
    # CLIPPING
    # =========================================================================

    def normalize(
        self,
        event: BaseEvent,
        window: DayWindow,
        reference_now: datetime
    ) -> Tuple[LayoutItem, List[LayoutWarning]]:
        """Map one included event to an unpacked LayoutItem."""
        warnings: List[LayoutWarning] = []

        end_instant, malformed = self.effective_end(event, window, reference_now)
        if malformed:
            warnings.append(LayoutWarning(
                code=ErrorCode.MALFORMED_INTERVAL,
                event_id=event.event_id,
                message="end precedes start; laid out as zero-length",
            ))
            logger.warning("Sleep %s ends before it starts; clamping to zero length", event.event_id)

        start_minute = max(0, window.minutes_from_start(event.start_instant))
        visible_end = min(MINUTES_PER_DAY, window.minutes_from_start(end_instant))
        visible_end = max(visible_end, start_minute)
        end_minute = min(MINUTES_PER_DAY, max(visible_end, start_minute + self._min_span))

        tone, detail_warning = self._tone_for(event)
        if detail_warning:
            warnings.append(detail_warning)

        item = LayoutItem(
            event_id=event.event_id,
            kind=event.kind,
            layer=ItemLayer.BACKGROUND if event.is_interval else ItemLayer.FOREGROUND,
            tone=tone,
            start_minute=start_minute,
            end_minute=end_minute,
            visible_end_minute=visible_end,
            magnitude=event.magnitude if isinstance(event, FeedEvent) else None,
            is_ongoing=isinstance(event, SleepEvent) and event.is_ongoing,
        )
        return item, warnings

    def normalize_day(
        self,
        events: Iterable[BaseEvent],
        window: DayWindow,
        reference_now: datetime,
        subject_id: Optional[str] = None
    ) -> NormalizedDay:
        """
        Include, clip and order all events of one day column.

        Every included event yields exactly one item.
        """
        included = [
            e for e in events
            if (subject_id is None or e.subject_id == subject_id)
            and self.includes(e, window, reference_now)
        ]
        included.sort(key=lambda e: (window.localize(e.start_instant), e.event_id))

        items: List[LayoutItem] = []
        warnings: List[LayoutWarning] = []
        for event in included:
            item, item_warnings = self.normalize(event, window, reference_now)
            items.append(item)
            warnings.extend(item_warnings)

        logger.debug("Normalized %d events onto %s", len(items), window.day.isoformat())
        return NormalizedDay(window=window, items=tuple(items), warnings=tuple(warnings))

    def _tone_for(self, event: BaseEvent) -> Tuple[ItemTone, Optional[LayoutWarning]]:
        if event.kind is EventKind.FEED:
            return ItemTone.FEED, None
        if event.kind is EventKind.SLEEP:
            return ItemTone.SLEEP, None
        detail = event.detail if isinstance(event, DiaperEvent) else DiaperDetail.UNKNOWN
        if detail is DiaperDetail.UNKNOWN:
            logger.warning("Diaper %s has no usable detail; using 'both'", event.event_id)
            return ItemTone.BOTH, LayoutWarning(
                code=ErrorCode.UNPARSEABLE_DETAIL,
                event_id=event.event_id,
                message="missing or unparseable diaper detail; shown as both",
            )
        return _DIAPER_TONES[detail], None

