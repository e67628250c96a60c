"""
carelog - Timeline Layout & Prediction Engine

Deterministic day-column layout and next-feed forecasts for a caregiver
activity log (feeds, sleeps, diapers).

    engine = TimelineEngine(TimelineConfig(timezone="Asia/Tokyo"))
    week = engine.build_week(events, subject_id, selected_date, reference_now)
"""

from .contracts import (
    ErrorCode, LayoutWarning, RejectedRecord, CarelogError, ConfigurationError,
    EventKind, DiaperDetail, FeedEvent, SleepEvent, DiaperEvent, Event,
    GhostMode, TimelineConfig,
    ItemLayer, ItemTone, ColumnMode, DayWindow, LayoutItem, Ghost,
    DayLayout, WeekView, DailySummary,
)
from .engine import TimelineEngine
from .mapper import EventMapper, MappingResult

__version__ = "0.1.0"

__all__ = [
    'ErrorCode', 'LayoutWarning', 'RejectedRecord', 'CarelogError', 'ConfigurationError',
    'EventKind', 'DiaperDetail', 'FeedEvent', 'SleepEvent', 'DiaperEvent', 'Event',
    'GhostMode', 'TimelineConfig',
    'ItemLayer', 'ItemTone', 'ColumnMode', 'DayWindow', 'LayoutItem', 'Ghost',
    'DayLayout', 'WeekView', 'DailySummary',
    'TimelineEngine', 'EventMapper', 'MappingResult',
]
