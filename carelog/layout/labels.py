"""
Background Span Label Placer
============================

Chooses where inside a background span (sleep) its label is drawn so it
avoids the foreground items that start inside the span.

A single linear sweep subtracts [start - R, start + R] around each
foreground start from the span, then the label is centred in the
largest remaining gap (first one wins ties).
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import List, Sequence
import logging

from ..contracts.layout import LayoutItem

logger = logging.getLogger(__name__)

DEFAULT_ANCHOR_PERCENT = 50.0


@dataclass(frozen=True)
class Gap:
    """A free stretch of a span, in minutes."""
    start: float
    end: float

    @property
    def size(self) -> float:
        return self.end - self.start

    @property
    def center(self) -> float:
        return self.start + self.size / 2


class SpanLabelPlacer:
    """Place labels of background spans clear of foreground items."""

    def __init__(self, exclusion_radius: float = 24):
        self._radius = exclusion_radius

    def free_gaps(self, span: LayoutItem, foreground: Sequence[LayoutItem]) -> List[Gap]:
        """Disjoint free gaps of the span, in order of appearance."""
        starts = sorted(
            f.start_minute for f in foreground
            if span.start_minute <= f.start_minute <= span.end_minute
        )
        gaps: List[Gap] = []
        cursor = float(span.start_minute)
        for start in starts:
            blocked_top = max(span.start_minute, start - self._radius)
            if blocked_top > cursor:
                gaps.append(Gap(cursor, blocked_top))
            cursor = max(cursor, min(span.end_minute, start + self._radius))
        if cursor < span.end_minute:
            gaps.append(Gap(cursor, float(span.end_minute)))
        return gaps

    def anchor_percent(self, span: LayoutItem, foreground: Sequence[LayoutItem]) -> float:
        height = span.end_minute - span.start_minute
        if height <= 0:
            return DEFAULT_ANCHOR_PERCENT

        overlapping = [
            f for f in foreground
            if span.start_minute <= f.start_minute <= span.end_minute
        ]
        if not overlapping:
            return DEFAULT_ANCHOR_PERCENT

        gaps = self.free_gaps(span, overlapping)
        if not gaps:
            # Fully occluded
            return DEFAULT_ANCHOR_PERCENT

        best = gaps[0]
        for gap in gaps[1:]:
            if gap.size > best.size:
                best = gap
        return (best.center - span.start_minute) / height * 100

    def place(self, spans: Sequence[LayoutItem], foreground: Sequence[LayoutItem]) -> List[LayoutItem]:
        """Return the spans with label_anchor_percent set."""
        placed = []
        for span in spans:
            anchor = self.anchor_percent(span, foreground)
            if anchor != DEFAULT_ANCHOR_PERCENT:
                logger.debug("Label of %s anchored at %.1f%%", span.event_id, anchor)
            placed.append(replace(span, label_anchor_percent=anchor))
        return placed
