"""
Temporal Layer

Day windows, minute-axis normalization and the injected reference clock.
Nothing in this layer reads the system clock except ReferenceClock.live().
"""

from .clock import ReferenceClock
from .normalizer import DayWindowNormalizer, NormalizedDay

__all__ = ['ReferenceClock', 'DayWindowNormalizer', 'NormalizedDay']
