"""Combine detector outputs into one capped anomaly list."""

from collections.abc import Sequence

from tenexlog.models import Anomaly

from .detectors import RateSpikeAnomaly, SensitivePathAnomaly


def merge_anomalies(
    rate_spikes: Sequence[RateSpikeAnomaly] | None,
    sensitive: Sequence[SensitivePathAnomaly] | None,
    max_anomalies: int = 0,
) -> list[Anomaly]:
    """Rate spikes first, then sensitive path probes, each in detector order.

    Truncates to ``max_anomalies`` when positive. Always returns a list.
    """
    merged = [Anomaly.from_rate_spike(a) for a in rate_spikes or ()]
    merged.extend(Anomaly.from_sensitive_paths(a) for a in sensitive or ())

    if max_anomalies > 0 and len(merged) > max_anomalies:
        merged = merged[:max_anomalies]
    return merged
