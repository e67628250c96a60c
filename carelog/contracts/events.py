"""
Event Contracts

The caregiver log as the engine sees it: a closed sum type of three
immutable event variants. The engine only ever reads these.

VARIANTS:
=========
- FeedEvent:   point event, optional magnitude (volume in ml)
- SleepEvent:  interval event, end_instant None while ongoing
- DiaperEvent: point event, closed DiaperDetail variant
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union
import json


class EventKind(Enum):
    """Kind of logged activity."""
    FEED = "feed"
    SLEEP = "sleep"
    DIAPER = "diaper"


class DiaperDetail(Enum):
    """
    Closed diaper sub-type.

    UNKNOWN is the degraded value for missing or unparseable payloads and
    is counted and toned like BOTH.
    """
    PEE = "pee"
    POOP = "poop"
    BOTH = "both"
    UNKNOWN = "unknown"

    @property
    def has_pee(self) -> bool:
        return self is not DiaperDetail.POOP

    @property
    def has_poop(self) -> bool:
        return self is not DiaperDetail.PEE

    @classmethod
    def parse(cls, payload: Any) -> Optional[DiaperDetail]:
        """
        Parse a stored detail payload.

        Accepts a DiaperDetail, a bare sub-type string, a mapping with a
        'type' key, or a JSON string encoding such a mapping. Returns None
        when nothing recognisable is found.
        """
        if isinstance(payload, DiaperDetail):
            return payload
        if isinstance(payload, str):
            text = payload.strip()
            if not text:
                return None
            try:
                payload = json.loads(text)
            except ValueError:
                payload = text
        if isinstance(payload, dict):
            payload = payload.get('type')
        if not isinstance(payload, str):
            return None
        try:
            detail = cls(payload.strip().lower())
        except ValueError:
            return None
        return None if detail is DiaperDetail.UNKNOWN else detail


@dataclass(frozen=True)
class BaseEvent:
    """Fields shared by every event variant."""
    event_id: str
    subject_id: str
    start_instant: datetime

    @property
    def kind(self) -> EventKind:
        raise NotImplementedError

    @property
    def is_interval(self) -> bool:
        return False


@dataclass(frozen=True)
class FeedEvent(BaseEvent):
    magnitude: Optional[float] = None

    @property
    def kind(self) -> EventKind:
        return EventKind.FEED


@dataclass(frozen=True)
class SleepEvent(BaseEvent):
    end_instant: Optional[datetime] = None

    @property
    def kind(self) -> EventKind:
        return EventKind.SLEEP

    @property
    def is_interval(self) -> bool:
        return True

    @property
    def is_ongoing(self) -> bool:
        return self.end_instant is None


@dataclass(frozen=True)
class DiaperEvent(BaseEvent):
    detail: DiaperDetail = DiaperDetail.UNKNOWN

    @property
    def kind(self) -> EventKind:
        return EventKind.DIAPER


Event = Union[FeedEvent, SleepEvent, DiaperEvent]
