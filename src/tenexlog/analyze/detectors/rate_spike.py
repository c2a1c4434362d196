"""Per-source request rate spike detector."""

import logging
import math
from collections import defaultdict
from collections.abc import Sequence
from datetime import datetime

from tenexlog.parse import Event

from ..helpers import format_number, mean_std, round2, saturating_confidence
from .base import EventDetector, RateSpikeAnomaly


logger = logging.getLogger(__name__)


class RateSpikeDetector(EventDetector):
    """Flags minutes where a source IP's request count jumps above its own baseline.

    Each source is baselined against itself: the per-minute counts over every
    minute the source appears in give a population mean and stddev. A minute
    is flagged when its count is at least ``floor`` and either

    - the z-score reaches ``z_threshold``, or
    - the count reaches ``max(ceil(multiplier * mean), floor)``.

    The second condition catches spikes in short series where one large
    minute inflates the stddev. When every minute has the same count the
    stddev is zero and only the multiplier rule applies, with ``flat_z``
    used as the z-score for confidence.
    """

    # Confidence = 1 - e^(-z / CONFIDENCE_SCALE)
    CONFIDENCE_SCALE = 3.0

    def __init__(
        self,
        floor: int = 10,
        z_threshold: float = 2.0,
        multiplier: float = 2.5,
        flat_z: float = 3.0,
        keep_top: int = 0,
    ):
        self.floor = floor
        self.z_threshold = z_threshold
        self.multiplier = multiplier
        self.flat_z = flat_z
        self.keep_top = keep_top

    @property
    def kind(self) -> str:
        return RateSpikeAnomaly.kind

    def _group(self, events: Sequence[Event]) -> dict[str, dict[datetime, int]]:
        """Count events per (source IP, minute), skipping events without IP or timestamp."""
        per_ip: dict[str, dict[datetime, int]] = defaultdict(lambda: defaultdict(int))
        for ev in events:
            if not ev.src_ip or ev.ts is None:
                continue
            per_ip[ev.src_ip][ev.minute] += 1
        return per_ip

    def _score(self, count: float, mean: float, std: float) -> float | None:
        """Return the z used for confidence if ``count`` is a spike, else None."""
        if count < self.floor:
            return None

        if std > 0:
            z = (count - mean) / std
            if z >= self.z_threshold or count >= max(math.ceil(self.multiplier * mean), self.floor):
                return z
            return None

        if mean > 0 and count >= self.multiplier * mean:
            return self.flat_z
        return None

    def detect(self, events: Sequence[Event]) -> list[RateSpikeAnomaly]:
        out: list[RateSpikeAnomaly] = []

        for ip, minute_counts in self._group(events).items():
            mean, std = mean_std([float(c) for c in minute_counts.values()])

            for minute in sorted(minute_counts):
                count = minute_counts[minute]
                z = self._score(float(count), mean, std)
                if z is None:
                    continue
                out.append(
                    RateSpikeAnomaly(
                        src_ip=ip,
                        minute=minute,
                        count=count,
                        baseline=round2(mean),
                        z=round2(z),
                        confidence=saturating_confidence(z, self.CONFIDENCE_SCALE),
                        reason=self.describe(ip, minute, count, mean, z),
                    )
                )

        # Most recent minute first; IP breaks ties so output is reproducible
        out.sort(key=lambda a: a.src_ip)
        out.sort(key=lambda a: a.minute, reverse=True)

        if self.keep_top > 0 and len(out) > self.keep_top:
            out = out[: self.keep_top]

        logger.debug(f'{self.kind}: {len(out)} anomalies')
        return out

    def describe(self, ip: str, minute: datetime, count: int, mean: float, z: float) -> str:
        return (
            f'Unusual request burst from {ip} at {minute:%H:%M} UTC: '
            f'{count} req/min (baseline ≈ {format_number(round2(mean))}, z={format_number(round2(z))}).'
        )
