"""
Reference Clock
===============

Injectable source of the "now" instant used for ongoing sleeps and for
suppressing past predictions.

GUARANTEES:
- The engine never reads system time; callers pass reference_now
- A FIXED clock returns the same instant on every read
- A LIVE clock reads system time in the configured zone
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Optional


@dataclass(frozen=True)
class ReferenceClock:
    """
    Clock handed to the outer layers (API, demos).

    MODES:
    ======
    1. LIVE: system time, localized to tz
    2. FIXED: pinned instant, for tests and replays
    """
    tz: tzinfo = timezone.utc
    pinned: Optional[datetime] = None

    def now(self) -> datetime:
        if self.pinned is not None:
            if self.pinned.tzinfo is None:
                return self.pinned.replace(tzinfo=self.tz)
            return self.pinned.astimezone(self.tz)
        return datetime.now(self.tz)

    def is_live(self) -> bool:
        return self.pinned is None

    @classmethod
    def live(cls, tz: tzinfo = timezone.utc) -> ReferenceClock:
        return cls(tz=tz)

    @classmethod
    def fixed(cls, instant: datetime, tz: Optional[tzinfo] = None) -> ReferenceClock:
        return cls(tz=tz or instant.tzinfo or timezone.utc, pinned=instant)

    def __repr__(self) -> str:
        mode = "LIVE" if self.is_live() else f"FIXED@{self.pinned.isoformat()}"
        return f"ReferenceClock({mode}, tz={self.tz})"
