"""
Layout Layer

Pure geometry over normalized items: column packing for the wide
column, label placement for background spans, lanes for narrow columns.
"""

from .packing import ColumnPacker, Cluster
from .labels import SpanLabelPlacer, Gap, DEFAULT_ANCHOR_PERCENT
from .lanes import LaneAssigner

__all__ = [
    'ColumnPacker', 'Cluster',
    'SpanLabelPlacer', 'Gap', 'DEFAULT_ANCHOR_PERCENT',
    'LaneAssigner',
]
