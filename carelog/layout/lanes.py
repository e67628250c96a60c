"""
Narrow-Mode Lane Assigner
=========================

Greedy interval-graph colouring with a fixed proximity radius: each point
item, in time order, takes the smallest lane holding no earlier item
within `proximity_minutes` of it. Background spans stay in lane 0.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Dict, List, Sequence
import logging

from ..contracts.layout import ItemLayer, LayoutItem

logger = logging.getLogger(__name__)


class LaneAssigner:
    """Spread nearby foreground dots of a narrow column across lanes."""

    def __init__(self, proximity_minutes: float = 60):
        self._proximity = proximity_minutes

    def lanes_for(self, items: Sequence[LayoutItem]) -> Dict[str, int]:
        """Map event_id -> lane for the foreground items."""
        points = sorted(
            (i for i in items if i.layer is ItemLayer.FOREGROUND),
            key=lambda i: (i.start_minute, i.event_id)
        )
        lanes: List[List[int]] = []
        assigned: Dict[str, int] = {}

        for item in points:
            lane = 0
            while lane < len(lanes) and any(
                abs(placed - item.start_minute) < self._proximity for placed in lanes[lane]
            ):
                lane += 1
            if lane == len(lanes):
                lanes.append([])
            lanes[lane].append(item.start_minute)
            assigned[item.event_id] = lane

        if len(lanes) > 1:
            logger.debug("Narrow layout used %d lanes for %d dots", len(lanes), len(points))
        return assigned

    def assign(self, items: Sequence[LayoutItem]) -> List[LayoutItem]:
        lanes = self.lanes_for(items)
        return [replace(i, lane=lanes.get(i.event_id, 0)) for i in items]
