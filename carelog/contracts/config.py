"""
Engine Configuration

WHY FROZEN:
Config must not change during a layout pass.
Changes require a new config instance.
"""

from __future__ import annotations
from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
import math
import os

from .base import ConfigurationError


class GhostMode(Enum):
    """How forecast markers are produced."""
    NEXT_OCCURRENCE = "next-occurrence"
    HISTORICAL_AVERAGE = "historical-average"


# Interface spelling -> field name
_CAMEL_KEYS = {
    'fixedIntervalHours': 'fixed_interval_hours',
    'ghostMode': 'ghost_mode',
    'showGhost': 'show_ghost',
    'historyDays': 'history_days',
    'columnToleranceRatio': 'column_tolerance_ratio',
    'labelExclusionRadius': 'label_exclusion_radius',
    'laneProximityMinutes': 'lane_proximity_minutes',
    'minSpanMinutes': 'min_span_minutes',
    'weekStartsOn': 'week_starts_on',
}

_INT_FIELDS = ('history_days', 'min_span_minutes', 'week_starts_on')
_NUMBER_FIELDS = (
    'fixed_interval_hours', 'column_tolerance_ratio',
    'label_exclusion_radius', 'lane_proximity_minutes',
)

_TRUE_STRINGS = {'1', 'true', 'yes', 'on'}
_FALSE_STRINGS = {'0', 'false', 'no', 'off'}


@dataclass(frozen=True)
class TimelineConfig:
    """Tunables for layout and prediction."""
    fixed_interval_hours: float = 3.0
    ghost_mode: GhostMode = GhostMode.NEXT_OCCURRENCE
    show_ghost: bool = True
    history_days: int = 3
    column_tolerance_ratio: float = 0.25
    label_exclusion_radius: float = 24
    lane_proximity_minutes: float = 60
    min_span_minutes: int = 15
    timezone: str = "UTC"
    week_starts_on: int = 0

    def __post_init__(self):
        if isinstance(self.ghost_mode, str):
            object.__setattr__(self, 'ghost_mode', _parse_ghost_mode(self.ghost_mode))
        if not isinstance(self.ghost_mode, GhostMode):
            raise ConfigurationError(f"ghost_mode must be a GhostMode, got {self.ghost_mode!r}")
        for name in _INT_FIELDS:
            _require_int(name, getattr(self, name))
        for name in _NUMBER_FIELDS:
            _require_number(name, getattr(self, name))
        if not isinstance(self.show_ghost, bool):
            raise ConfigurationError(f"show_ghost must be a bool, got {self.show_ghost!r}")
        if not isinstance(self.timezone, str):
            raise ConfigurationError(f"timezone must be an IANA name, got {self.timezone!r}")

        if self.fixed_interval_hours <= 0:
            raise ConfigurationError("fixed_interval_hours must be positive")
        if self.history_days < 1:
            raise ConfigurationError("history_days must be at least 1")
        if self.column_tolerance_ratio < 0:
            raise ConfigurationError("column_tolerance_ratio must be non-negative")
        if self.label_exclusion_radius < 0:
            raise ConfigurationError("label_exclusion_radius must be non-negative")
        if self.lane_proximity_minutes <= 0:
            raise ConfigurationError("lane_proximity_minutes must be positive")
        if self.min_span_minutes < 0:
            raise ConfigurationError("min_span_minutes must be non-negative")
        if not 0 <= self.week_starts_on <= 6:
            raise ConfigurationError("week_starts_on must be a weekday index 0..6")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"unknown timezone {self.timezone!r}") from e

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def with_overrides(self, overrides: Optional[Mapping[str, Any]]) -> TimelineConfig:
        """Return a new config with the given (snake or camel case) keys replaced."""
        if not overrides:
            return self
        return replace(self, **_normalize_keys(overrides))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TimelineConfig:
        return cls(**_normalize_keys(data))

    @classmethod
    def from_env(cls, prefix: str = "CARELOG_", environ: Optional[Mapping[str, str]] = None) -> TimelineConfig:
        """
        Build a config from environment variables.

        Each field maps to PREFIX + FIELD_NAME in upper case, e.g.
        CARELOG_FIXED_INTERVAL_HOURS=2.5. Unset variables keep defaults.
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for f in fields(cls):
            raw = env.get(prefix + f.name.upper())
            if raw is None:
                continue
            values[f.name] = _coerce_env(f.name, raw)
        return cls(**values)


def _require_int(name: str, value: Any) -> None:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def _require_number(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ConfigurationError(f"{name} must be a finite number, got {value!r}")


def _parse_ghost_mode(value: str) -> GhostMode:
    try:
        return GhostMode(value.strip().lower().replace('_', '-'))
    except ValueError:
        raise ConfigurationError(f"unknown ghost mode {value!r}") from None


def _normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(TimelineConfig)}
    out: Dict[str, Any] = {}
    for key, value in data.items():
        name = _CAMEL_KEYS.get(key, key)
        if name not in known:
            raise ConfigurationError(f"unknown configuration key {key!r}")
        out[name] = value
    return out


def _coerce_env(name: str, raw: str) -> Any:
    raw = raw.strip()
    try:
        if name == 'show_ghost':
            lowered = raw.lower()
            if lowered in _TRUE_STRINGS:
                return True
            if lowered in _FALSE_STRINGS:
                return False
            raise ValueError(raw)
        if name in ('history_days', 'min_span_minutes', 'week_starts_on'):
            return int(raw)
        if name in ('ghost_mode', 'timezone'):
            return raw
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"invalid value {raw!r} for {name}") from None
