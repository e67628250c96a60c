"""
Predictive Ghost Generator

Forecast markers for the selected day, computed from feed history.

BOUNDARY ENFORCEMENT:
- Deterministic prediction, same inputs = same ghosts
- NO model training, NO persistence
- Ghosts are never written back as events
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional, Sequence, Tuple
import logging

import numpy as np

from ..contracts.config import GhostMode, TimelineConfig
from ..contracts.events import BaseEvent, FeedEvent
from ..contracts.layout import DayWindow, Ghost

logger = logging.getLogger(__name__)


def _instant(window: DayWindow, value: datetime) -> datetime:
    """Absolute UTC instant; naive values are read as local to the window."""
    return window.localize(value).astimezone(timezone.utc)


def _feeds_for(events: Iterable[BaseEvent], subject_id: Optional[str]) -> List[FeedEvent]:
    return [
        e for e in events
        if isinstance(e, FeedEvent) and (subject_id is None or e.subject_id == subject_id)
    ]


class NextOccurrencePredictor:
    """
    Predict the next feed as last feed + a fixed interval.

    The last feed is the globally most recent one at or before
    reference_now, regardless of day boundaries. A prediction is only
    shown on the day it falls in, and only while it is not in the past.
    """

    def __init__(self, interval_hours: float = 3.0):
        self._interval = timedelta(hours=interval_hours)

    def last_feed(
        self,
        feeds: Sequence[FeedEvent],
        window: DayWindow,
        reference_now: datetime
    ) -> Optional[FeedEvent]:
        now = _instant(window, reference_now)
        past = [f for f in feeds if _instant(window, f.start_instant) <= now]
        if not past:
            return None
        return max(past, key=lambda f: (_instant(window, f.start_instant), f.event_id))

    def predict(
        self,
        events: Iterable[BaseEvent],
        subject_id: Optional[str],
        window: DayWindow,
        reference_now: datetime
    ) -> List[Ghost]:
        last = self.last_feed(_feeds_for(events, subject_id), window, reference_now)
        if last is None:
            return []

        # Elapsed time, not wall-clock time: DST shifts move the local label
        predicted = _instant(window, last.start_instant) + self._interval
        if not window.same_day(predicted):
            return []
        if predicted < _instant(window, reference_now):
            logger.debug("Predicted feed at %s already past; suppressed", predicted.isoformat())
            return []

        return [Ghost(
            time_minute=float(window.minutes_from_start(predicted)),
            mode=GhostMode.NEXT_OCCURRENCE,
            predicted_magnitude=last.magnitude,
        )]


@dataclass(frozen=True)
class OrdinalSample:
    """Minute-of-day and magnitude of the n-th feed of one past day."""
    day_offset: int
    ordinal: int
    minute: int
    magnitude: Optional[float]


class HistoricalAveragePredictor:
    """
    Average the previous N days' feeds aligned by ordinal position.

    The k-th feed of each day pairs with the k-th feed of the others.
    Days with fewer feeds do not contribute to the missing ordinals;
    nothing is padded or carried forward.
    """

    def __init__(self, history_days: int = 3):
        self._history_days = history_days

    def samples(
        self,
        feeds: Sequence[FeedEvent],
        window: DayWindow
    ) -> List[OrdinalSample]:
        samples: List[OrdinalSample] = []
        for offset in range(1, self._history_days + 1):
            past = window.shifted(-offset)
            day_feeds = sorted(
                (f for f in feeds if past.same_day(f.start_instant)),
                key=lambda f: (past.localize(f.start_instant), f.event_id)
            )
            for ordinal, feed in enumerate(day_feeds):
                samples.append(OrdinalSample(
                    day_offset=offset,
                    ordinal=ordinal,
                    minute=past.minutes_from_start(feed.start_instant),
                    magnitude=feed.magnitude,
                ))
        return samples

    def predict(
        self,
        events: Iterable[BaseEvent],
        subject_id: Optional[str],
        window: DayWindow,
        reference_now: datetime
    ) -> List[Ghost]:
        samples = self.samples(_feeds_for(events, subject_id), window)
        if not samples:
            return []

        ghosts: List[Ghost] = []
        for ordinal in range(max(s.ordinal for s in samples) + 1):
            at_ordinal = [s for s in samples if s.ordinal == ordinal]
            minutes = np.array([s.minute for s in at_ordinal], dtype=float)
            magnitudes = np.array(
                [s.magnitude for s in at_ordinal if s.magnitude is not None], dtype=float
            )
            ghosts.append(Ghost(
                time_minute=float(minutes.mean()),
                mode=GhostMode.HISTORICAL_AVERAGE,
                predicted_magnitude=float(magnitudes.mean()) if magnitudes.size else None,
                ordinal=ordinal,
            ))

        logger.debug(
            "Averaged %d feeds from %d of %d days into %d ghosts",
            len(samples), len({s.day_offset for s in samples}), self._history_days, len(ghosts)
        )
        return ghosts


class GhostGenerator:
    """Select the prediction mode from config and produce the day's ghosts."""

    def __init__(self, config: Optional[TimelineConfig] = None):
        self._config = config or TimelineConfig()
        self._next = NextOccurrencePredictor(self._config.fixed_interval_hours)
        self._average = HistoricalAveragePredictor(self._config.history_days)

    def ghosts_for_day(
        self,
        events: Iterable[BaseEvent],
        subject_id: Optional[str],
        window: DayWindow,
        reference_now: datetime
    ) -> Tuple[Ghost, ...]:
        if not self._config.show_ghost:
            return ()
        if self._config.ghost_mode is GhostMode.HISTORICAL_AVERAGE:
            predictor = self._average
        else:
            predictor = self._next
        return tuple(predictor.predict(events, subject_id, window, reference_now))
