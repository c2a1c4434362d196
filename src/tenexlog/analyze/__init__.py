"""Anomaly analysis over parsed log events.

This module provides:
- Event detectors (rate spikes per source, sensitive path probing)
- Numeric helpers for baselining and confidence scoring
- The merger that combines detector output into one list
"""

from .detectors import (
    EventDetector,
    RateSpikeAnomaly,
    RateSpikeDetector,
    SensitivePathAnomaly,
    SensitivePathDetector,
    default_detectors,
)
from .helpers import mean_std, round2, round_half_away, saturating_confidence
from .merge import merge_anomalies


__all__ = [
    # Base classes and data models
    'EventDetector',
    'RateSpikeAnomaly',
    'SensitivePathAnomaly',
    # Detectors
    'RateSpikeDetector',
    'SensitivePathDetector',
    # Factory
    'default_detectors',
    # Helpers
    'mean_std',
    'round2',
    'round_half_away',
    'saturating_confidence',
    # Merge
    'merge_anomalies',
]
