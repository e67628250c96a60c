"""Daily totals for the summary screen."""

from __future__ import annotations
from datetime import datetime
from typing import Iterable, Optional
import logging

from .contracts.base import MINUTES_PER_DAY
from .contracts.events import BaseEvent, DiaperEvent, FeedEvent, SleepEvent
from .contracts.layout import DailySummary, DayWindow

logger = logging.getLogger(__name__)


class DailySummarizer:
    """
    Totals over the events that *start* on a day.

    Ongoing sleeps run to reference_now when the day is today and to the
    end of the day otherwise. Total sleep is capped at a full day.
    """

    def summarize(
        self,
        events: Iterable[BaseEvent],
        subject_id: Optional[str],
        window: DayWindow,
        reference_now: datetime
    ) -> DailySummary:
        now = window.localize(reference_now)
        is_today = window.same_day(now)

        sleep_minutes = 0
        feed_count = 0
        feed_total = 0.0
        pee = poop = 0

        for event in events:
            if subject_id is not None and event.subject_id != subject_id:
                continue
            if not window.same_day(event.start_instant):
                continue
            if isinstance(event, SleepEvent):
                if event.end_instant is not None:
                    end = window.localize(event.end_instant)
                else:
                    end = now if is_today else window.end
                minutes = int((end - window.localize(event.start_instant)).total_seconds() // 60)
                sleep_minutes += max(0, minutes)
            elif isinstance(event, FeedEvent):
                feed_count += 1
                feed_total += event.magnitude or 0.0
            elif isinstance(event, DiaperEvent):
                if event.detail.has_pee:
                    pee += 1
                if event.detail.has_poop:
                    poop += 1

        logger.debug("Summary for %s: %d feeds, %d sleep minutes", window.day.isoformat(), feed_count, sleep_minutes)
        return DailySummary(
            day=window.day,
            sleep_minutes=min(sleep_minutes, MINUTES_PER_DAY),
            feed_count=feed_count,
            feed_total=feed_total,
            pee_count=pee,
            poop_count=poop,
        )


def feed_total_for_day(
    events: Iterable[BaseEvent],
    subject_id: Optional[str],
    window: DayWindow
) -> float:
    """Sum of feed magnitudes whose local date is the window's day."""
    return float(sum(
        (e.magnitude or 0.0) for e in events
        if isinstance(e, FeedEvent)
        and (subject_id is None or e.subject_id == subject_id)
        and window.same_day(e.start_instant)
    ))
