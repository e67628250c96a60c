"""
Interval Clustering & Column Packer
===================================

Lays foreground items of one day side by side when they overlap and at
full width when they do not.

ALGORITHM:
==========
1. Clustering: walk items by start_minute keeping the running maximum
   end of the current cluster. An item starting at or after that maximum
   opens a new cluster. Clusters are maximal connected-overlap groups.
2. Packing (per cluster): order by (start asc, duration desc, id) and put
   each item in the first column whose end overlaps the item's start by
   no more than duration * tolerance_ratio; otherwise open a column.
3. column_fraction = 100 / columns in the cluster,
   column_offset = column_fraction * column_index.

No backtracking. O(n * columns).
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple
import logging

from ..contracts.layout import LayoutItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cluster:
    """A maximal set of transitively overlapping items."""
    index: int
    items: Tuple[LayoutItem, ...]

    @property
    def start_minute(self) -> int:
        return min(i.start_minute for i in self.items)

    @property
    def end_minute(self) -> int:
        return max(i.end_minute for i in self.items)


def _start_order(item: LayoutItem):
    return (item.start_minute, item.event_id)


def _packing_order(item: LayoutItem):
    # Longer items win ties for the leftmost columns.
    return (item.start_minute, -item.duration, item.event_id)


class ColumnPacker:
    """Cluster and column-pack foreground items."""

    def __init__(self, tolerance_ratio: float = 0.25):
        self._tolerance_ratio = tolerance_ratio

    def tolerance_for(self, item: LayoutItem) -> float:
        return item.duration * self._tolerance_ratio

    def cluster(self, items: Sequence[LayoutItem]) -> List[Cluster]:
        """Group items into maximal connected-overlap clusters."""
        clusters: List[Cluster] = []
        current: List[LayoutItem] = []
        running_max = 0

        for item in sorted(items, key=_start_order):
            if current and item.start_minute >= running_max:
                clusters.append(Cluster(index=len(clusters), items=tuple(current)))
                current = []
            if not current:
                running_max = item.end_minute
            else:
                running_max = max(running_max, item.end_minute)
            current.append(item)

        if current:
            clusters.append(Cluster(index=len(clusters), items=tuple(current)))
        return clusters

    def assign_columns(self, cluster: Sequence[LayoutItem]) -> Tuple[List[Tuple[LayoutItem, int]], int]:
        """
        Assign a column index to every member of one cluster.

        Returns (item, column_index) pairs in packing order and the number
        of columns opened.
        """
        column_ends: List[int] = []
        placed: List[Tuple[LayoutItem, int]] = []

        for item in sorted(cluster, key=_packing_order):
            tolerance = self.tolerance_for(item)
            chosen = -1
            for index, column_end in enumerate(column_ends):
                overlap = max(0, column_end - item.start_minute)
                if overlap <= tolerance:
                    chosen = index
                    break
            if chosen == -1:
                chosen = len(column_ends)
                column_ends.append(item.end_minute)
            else:
                column_ends[chosen] = max(column_ends[chosen], item.end_minute)
            placed.append((item, chosen))

        return placed, len(column_ends)

    def pack(self, items: Sequence[LayoutItem]) -> List[LayoutItem]:
        """
        Cluster and pack, returning new items with width, offset and
        cluster_index set. Output order: clusters in time order, members
        in packing order.
        """
        packed: List[LayoutItem] = []
        for cluster in self.cluster(items):
            placed, column_count = self.assign_columns(cluster.items)
            fraction = 100.0 / column_count
            for item, column in placed:
                packed.append(replace(
                    item,
                    column_fraction=fraction,
                    column_offset=fraction * column,
                    cluster_index=cluster.index,
                ))
            if column_count > 1:
                logger.debug(
                    "Cluster %d: %d items in %d columns",
                    cluster.index, len(cluster.items), column_count
                )
        return packed
