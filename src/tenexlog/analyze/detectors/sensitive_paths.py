"""Sensitive path probing detector."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from tenexlog.parse import Event
from tenexlog.settings import DEFAULT_SENSITIVE_PREFIXES

from ..helpers import saturating_confidence
from .base import EventDetector, SensitivePathAnomaly


logger = logging.getLogger(__name__)


@dataclass
class _SourceHits:
    first_seen: datetime
    last_seen: datetime
    per_prefix: dict[str, int] = field(default_factory=dict)

    def add(self, prefix: str, ts: datetime) -> None:
        self.per_prefix[prefix] = self.per_prefix.get(prefix, 0) + 1
        if ts < self.first_seen:
            self.first_seen = ts
        if ts > self.last_seen:
            self.last_seen = ts


class SensitivePathDetector(EventDetector):
    """Flags sources that repeatedly request admin, credential or infrastructure paths.

    Paths are matched case-insensitively against an ordered prefix list; the
    first matching prefix is the one attributed. A source is reported once
    when its total hits reach ``min_hits`` or its distinct matched prefixes
    reach ``min_unique``.
    """

    # Confidence = 1 - e^(-hits / CONFIDENCE_SCALE)
    CONFIDENCE_SCALE = 10.0

    def __init__(
        self,
        prefixes: Sequence[str] = DEFAULT_SENSITIVE_PREFIXES,
        min_hits: int = 5,
        min_unique: int = 2,
    ):
        self.prefixes: tuple[str, ...] = tuple(p.lower() for p in prefixes)
        self.min_hits = min_hits
        self.min_unique = min_unique

    @property
    def kind(self) -> str:
        return SensitivePathAnomaly.kind

    def match(self, path: str) -> str | None:
        """Return the first sensitive prefix ``path`` starts with, if any."""
        lpath = path.lower()
        for prefix in self.prefixes:
            if lpath.startswith(prefix):
                return prefix
        return None

    def detect(self, events: Sequence[Event]) -> list[SensitivePathAnomaly]:
        sources: dict[str, _SourceHits] = {}

        for ev in events:
            if not ev.src_ip or not ev.path or ev.ts is None:
                continue
            prefix = self.match(ev.path)
            if prefix is None:
                continue
            hits = sources.get(ev.src_ip)
            if hits is None:
                hits = sources[ev.src_ip] = _SourceHits(first_seen=ev.ts, last_seen=ev.ts)
            hits.add(prefix, ev.ts)

        out: list[SensitivePathAnomaly] = []
        for ip, src in sources.items():
            total = sum(src.per_prefix.values())
            unique = len(src.per_prefix)
            if total < self.min_hits and unique < self.min_unique:
                continue
            out.append(
                SensitivePathAnomaly(
                    src_ip=ip,
                    first_seen=src.first_seen,
                    last_seen=src.last_seen,
                    hits=total,
                    unique_prefixes=unique,
                    confidence=saturating_confidence(total, self.CONFIDENCE_SCALE),
                    reason=self.describe(ip, total, unique, src.first_seen, src.last_seen),
                )
            )

        out.sort(key=lambda a: a.src_ip)
        out.sort(key=lambda a: a.last_seen, reverse=True)

        logger.debug(f'{self.kind}: {len(out)} anomalies from {len(sources)} probing sources')
        return out

    def describe(self, ip: str, hits: int, unique: int, first: datetime, last: datetime) -> str:
        window = max(0, int((last - first).total_seconds() // 60))
        return (
            f'Sensitive paths probed from {ip}: {hits} hits across {unique} '
            f'sensitive prefixes over ~{window} minute(s).'
        )
