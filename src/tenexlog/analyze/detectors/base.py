"""Base classes and data models for anomaly detection."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from tenexlog.parse import Event


@dataclass(frozen=True)
class RateSpikeAnomaly:
    """A minute in which one source sent far more requests than its own baseline."""

    src_ip: str
    minute: datetime  # UTC, truncated to the minute
    count: int  # Events from src_ip in that minute
    baseline: float  # Mean per-minute count for src_ip (2 decimals)
    z: float  # Z-score, or the flat-series pseudo-z (2 decimals)
    confidence: float  # 0.0 to 1.0
    reason: str  # Human-readable explanation

    kind = 'rate_spike'


@dataclass(frozen=True)
class SensitivePathAnomaly:
    """A source that repeatedly requested sensitive URL prefixes."""

    src_ip: str
    first_seen: datetime  # Earliest sensitive hit (UTC)
    last_seen: datetime  # Latest sensitive hit (UTC)
    hits: int  # Total sensitive hits
    unique_prefixes: int  # Distinct prefixes matched
    confidence: float  # 0.0 to 1.0
    reason: str  # Human-readable explanation

    kind = 'sensitive_paths'


class EventDetector(ABC):
    """Base class for detectors that run over retained events.

    Each detector looks at the whole retained row set at once and returns
    its anomalies in a deterministic order.
    """

    @property
    @abstractmethod
    def kind(self) -> str:
        """Anomaly kind produced by this detector (e.g., 'rate_spike')."""
        pass

    @abstractmethod
    def detect(self, events: Sequence[Event]) -> list:
        """Run detection.

        Args:
            events: Retained events, in input order.

        Returns:
            List of anomalies, possibly empty, never None.
        """
        pass
