"""
Contracts

Immutable data exchanged between the engine layers and with the
rendering collaborator. No behaviour beyond derived properties.
"""

from .base import (
    MINUTES_PER_DAY, ErrorCode, LayoutWarning, RejectedRecord,
    CarelogError, ConfigurationError, RecordError,
)
from .events import (
    EventKind, DiaperDetail, BaseEvent, FeedEvent, SleepEvent, DiaperEvent, Event,
)
from .config import GhostMode, TimelineConfig
from .layout import (
    ItemLayer, ItemTone, ColumnMode, DayWindow, LayoutItem, Ghost,
    DayLayout, WeekView, DailySummary, format_duration, format_clock,
)

__all__ = [
    'MINUTES_PER_DAY', 'ErrorCode', 'LayoutWarning', 'RejectedRecord',
    'CarelogError', 'ConfigurationError', 'RecordError',
    'EventKind', 'DiaperDetail', 'BaseEvent', 'FeedEvent', 'SleepEvent', 'DiaperEvent', 'Event',
    'GhostMode', 'TimelineConfig',
    'ItemLayer', 'ItemTone', 'ColumnMode', 'DayWindow', 'LayoutItem', 'Ghost',
    'DayLayout', 'WeekView', 'DailySummary', 'format_duration', 'format_clock',
]
