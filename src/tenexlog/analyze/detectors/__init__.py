"""Anomaly detection modules.

This package contains the detectors that run over retained log events.
"""

from tenexlog.settings import AnalysisSettings

from .base import EventDetector, RateSpikeAnomaly, SensitivePathAnomaly
from .rate_spike import RateSpikeDetector
from .sensitive_paths import SensitivePathDetector


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
]


def default_detectors(settings: AnalysisSettings | None = None) -> tuple[RateSpikeDetector, SensitivePathDetector]:
    """Get the default detectors configured from settings.

    Returns:
        (rate spike detector, sensitive path detector)
    """
    settings = settings or AnalysisSettings()
    return (
        RateSpikeDetector(
            floor=settings.spike_floor,
            z_threshold=settings.spike_z_threshold,
            multiplier=settings.spike_multiplier,
            flat_z=settings.spike_flat_z,
            keep_top=settings.effective_spike_keep_top,
        ),
        SensitivePathDetector(
            prefixes=settings.sensitive_prefixes,
            min_hits=settings.sensitive_min_hits,
            min_unique=settings.sensitive_min_unique,
        ),
    )
