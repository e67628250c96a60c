"""
Prediction Layer

Ghost markers: next-occurrence and historical-average forecasts.
"""

from .ghosts import (
    GhostGenerator, NextOccurrencePredictor, HistoricalAveragePredictor, OrdinalSample,
)

__all__ = [
    'GhostGenerator', 'NextOccurrencePredictor', 'HistoricalAveragePredictor', 'OrdinalSample',
]
