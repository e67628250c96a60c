"""
Base Contracts and Shared Types

Foundational types used across all layers of the timeline engine.
All types here are IMMUTABLE and represent pure data.

BOUNDARY ENFORCEMENT:
=====================
- No layer imports another layer's implementation, only contracts
- Degradations are recorded as data (LayoutWarning), never raised
- Exceptions are reserved for configuration and API input errors
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Tuple


# Minute axis of a single day column.
MINUTES_PER_DAY = 1440


# =============================================================================
# ERROR STATES (Explicit, never silent)
# =============================================================================

class ErrorCode(Enum):
    """
    Explicit error codes for every abnormal input the engine tolerates
    or rejects.
    """
    # Layout degradations
    MALFORMED_INTERVAL = auto()
    UNPARSEABLE_DETAIL = auto()

    # Record mapping
    UNKNOWN_EVENT_KIND = auto()
    INVALID_TIMESTAMP = auto()
    INVALID_MAGNITUDE = auto()
    MISSING_FIELD = auto()

    # Configuration
    INVALID_CONFIG = auto()


@dataclass(frozen=True)
class LayoutWarning:
    """
    A degradation applied to a single event during a layout pass.

    The pass still produced an item for the event; the warning records
    which default was substituted.
    """
    code: ErrorCode
    event_id: str
    message: str

    def to_dict(self) -> dict:
        return {
            'code': self.code.name,
            'event_id': self.event_id,
            'message': self.message,
        }


@dataclass(frozen=True)
class RejectedRecord:
    """A persistence record that could not be turned into an Event."""
    record_id: Optional[str]
    code: ErrorCode
    reason: str
    context: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            'record_id': self.record_id,
            'code': self.code.name,
            'reason': self.reason,
            'context': dict(self.context),
        }


# =============================================================================
# EXCEPTIONS
# =============================================================================

class CarelogError(Exception):
    """Base class for errors raised by the timeline engine."""

    def __init__(self, code: ErrorCode, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class ConfigurationError(CarelogError, ValueError):
    """Raised when a TimelineConfig cannot be constructed."""

    def __init__(self, message: str):
        super().__init__(ErrorCode.INVALID_CONFIG, message)


class RecordError(CarelogError, ValueError):
    """Raised while mapping a single record; caught by the mapper."""
    pass
