"""
Record to Event Mapper

Converts persistence rows into the Event sum type.

MAPPING RULES:
==============
1. Every row becomes exactly one Event or one RejectedRecord
2. Unknown kinds and unparseable start times are rejected, never raised
3. Missing or unparseable diaper detail degrades to DiaperDetail.UNKNOWN
4. A non-numeric amount or unreadable sleep end is dropped with a warning
5. end_instant is kept for sleep only
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional, Tuple
import logging
import math

from .contracts.base import ErrorCode, LayoutWarning, RecordError, RejectedRecord
from .contracts.events import DiaperDetail, DiaperEvent, Event, EventKind, FeedEvent, SleepEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MappingResult:
    events: Tuple[Event, ...]
    rejected: Tuple[RejectedRecord, ...] = field(default_factory=tuple)
    warnings: Tuple[LayoutWarning, ...] = field(default_factory=tuple)


def parse_instant(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp (a trailing 'Z' means UTC)."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        raise RecordError(ErrorCode.INVALID_TIMESTAMP, f"not a timestamp: {value!r}")
    text = value.strip()
    if text.endswith(('Z', 'z')):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise RecordError(ErrorCode.INVALID_TIMESTAMP, f"not a timestamp: {value!r}") from None


def _first(record: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if record.get(key) is not None:
            return record[key]
    return None


class EventMapper:
    """Single point of conversion from stored rows to events."""

    def map_record(self, record: Mapping[str, Any]) -> Event:
        """Map one row; raises RecordError for rows that cannot be used."""
        event, _ = self._map_one(record)
        return event

    def map_records(self, records: Iterable[Mapping[str, Any]]) -> MappingResult:
        events: List[Event] = []
        rejected: List[RejectedRecord] = []
        warnings: List[LayoutWarning] = []
        for record in records:
            try:
                event, record_warnings = self._map_one(record)
            except RecordError as e:
                record_id = _first(record, 'id', 'event_id')
                rejected.append(RejectedRecord(
                    record_id=None if record_id is None else str(record_id),
                    code=e.code,
                    reason=e.message,
                ))
                logger.warning("Rejected record %s: %s", record_id, e.message)
                continue
            events.append(event)
            warnings.extend(record_warnings)
        return MappingResult(events=tuple(events), rejected=tuple(rejected), warnings=tuple(warnings))

    def _map_one(self, record: Mapping[str, Any]) -> Tuple[Event, List[LayoutWarning]]:
        event_id = _first(record, 'id', 'event_id')
        if event_id is None:
            raise RecordError(ErrorCode.MISSING_FIELD, "record has no id")
        subject_id = _first(record, 'babyId', 'baby_id', 'subjectId', 'subject_id')
        if subject_id is None:
            raise RecordError(ErrorCode.MISSING_FIELD, "record has no subject id")

        raw_kind = _first(record, 'type', 'kind')
        try:
            kind = EventKind(str(raw_kind).strip().lower())
        except ValueError:
            raise RecordError(ErrorCode.UNKNOWN_EVENT_KIND, f"unknown event type {raw_kind!r}") from None

        start = parse_instant(_first(record, 'startTime', 'start_time', 'start_instant'))
        event_id = str(event_id)
        common = dict(event_id=event_id, subject_id=str(subject_id), start_instant=start)
        warnings: List[LayoutWarning] = []

        if kind is EventKind.SLEEP:
            raw_end = _first(record, 'endTime', 'end_time', 'end_instant')
            end = None
            if raw_end is not None:
                try:
                    end = parse_instant(raw_end)
                except RecordError as e:
                    # Unreadable end: treat as still ongoing
                    logger.warning("Sleep %s has unreadable end %r; treating as ongoing", event_id, raw_end)
                    warnings.append(LayoutWarning(e.code, event_id, "unreadable end time; treated as ongoing"))
            return SleepEvent(end_instant=end, **common), warnings

        if kind is EventKind.FEED:
            raw_amount = _first(record, 'amount', 'magnitude')
            magnitude = self._magnitude(raw_amount)
            if raw_amount is not None and magnitude is None:
                logger.warning("Feed %s has non-numeric amount %r; ignoring", event_id, raw_amount)
                warnings.append(LayoutWarning(
                    ErrorCode.INVALID_MAGNITUDE, event_id, f"amount {raw_amount!r} is not a number; ignored"
                ))
            return FeedEvent(magnitude=magnitude, **common), warnings

        payload = _first(record, 'note', 'detail')
        detail = DiaperDetail.parse(payload)
        return DiaperEvent(detail=detail or DiaperDetail.UNKNOWN, **common), warnings

    def _magnitude(self, raw: Any) -> Optional[float]:
        if raw is None or isinstance(raw, bool):
            return None
        try:
            value = float(raw)
        except (TypeError, ValueError):
            return None
        return value if math.isfinite(value) else None
