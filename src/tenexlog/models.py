"""Pydantic models for analysis output"""

from datetime import datetime
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tenexlog.parse import Bucket, Event, Summary


if TYPE_CHECKING:
    from tenexlog.analyze.detectors import RateSpikeAnomaly, SensitivePathAnomaly


class WireModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SummaryModel(WireModel):
    """Aggregate stats over the scanned portion of the input"""

    lines: int = Field(..., examples=[1200], description='Lines scanned')
    unique_sources: int = Field(..., examples=[37], description='Distinct source IPs with a usable timestamp')
    start: datetime | None = Field(None, description='Earliest valid timestamp (UTC)')
    end: datetime | None = Field(None, description='Latest valid timestamp (UTC)')

    @classmethod
    def from_summary(cls, summary: Summary) -> 'SummaryModel':
        return cls(
            lines=summary.lines,
            unique_sources=summary.unique_sources,
            start=summary.start,
            end=summary.end,
        )


class BucketModel(WireModel):
    """Events in one UTC minute"""

    minute: datetime = Field(..., description='Minute boundary (UTC)')
    count: int = Field(..., examples=[42])

    @classmethod
    def from_bucket(cls, bucket: Bucket) -> 'BucketModel':
        return cls(minute=bucket.minute, count=bucket.count)


class EventModel(WireModel):
    """A parsed log row. Zero-valued columns are left out."""

    ts: datetime | None = None
    src_ip: str | None = Field(None, examples=['10.0.0.5'])
    dst: str | None = None
    method: str | None = Field(None, examples=['GET'])
    path: str | None = Field(None, examples=['/login'])
    status: int | None = Field(None, examples=[200])
    nbytes: int | None = Field(None, alias='bytes', examples=[512])
    user_agent: str | None = Field(None, alias='ua')

    @classmethod
    def from_event(cls, ev: Event) -> 'EventModel':
        return cls(
            ts=ev.ts,
            src_ip=ev.src_ip or None,
            dst=ev.dst or None,
            method=ev.method or None,
            path=ev.path or None,
            status=ev.status or None,
            nbytes=ev.nbytes or None,
            user_agent=ev.user_agent or None,
        )


class Anomaly(WireModel):
    """One anomaly of either kind.

    Fields that do not apply to ``kind`` stay None and are left out of the
    serialized form.
    """

    kind: Literal['rate_spike', 'sensitive_paths']
    src_ip: str

    # rate_spike
    minute: datetime | None = None
    count: int | None = None
    baseline: float | None = None
    z: float | None = None

    # sensitive_paths
    first_seen: datetime | None = None
    last_seen: datetime | None = None
    hits: int | None = None
    unique_prefixes: int | None = None

    confidence: float = Field(..., ge=0.0, le=1.0)
    reason: str

    @classmethod
    def from_rate_spike(cls, a: 'RateSpikeAnomaly') -> 'Anomaly':
        return cls(
            kind='rate_spike',
            src_ip=a.src_ip,
            minute=a.minute,
            count=a.count,
            baseline=a.baseline,
            z=a.z,
            confidence=a.confidence,
            reason=a.reason,
        )

    @classmethod
    def from_sensitive_paths(cls, a: 'SensitivePathAnomaly') -> 'Anomaly':
        return cls(
            kind='sensitive_paths',
            src_ip=a.src_ip,
            first_seen=a.first_seen,
            last_seen=a.last_seen,
            hits=a.hits,
            unique_prefixes=a.unique_prefixes,
            confidence=a.confidence,
            reason=a.reason,
        )


class AnalysisResponse(WireModel):
    """Full result of analyzing one log source"""

    path: str = Field(..., examples=['/var/log/access.tsv'], description='Analyzed source')
    size_bytes: int | None = Field(None, description='Source size in bytes (None for streams)')
    time: float = Field(..., examples=[0.123], description='Analysis time in seconds')
    summary: SummaryModel
    timeline: list[BucketModel] = Field(default_factory=list, description='Per-minute counts, ascending')
    rows: list[EventModel] = Field(default_factory=list, description='First retained rows')
    anomalies: list[Anomaly] = Field(default_factory=list, description='Rate spikes, then sensitive path probes')
    note: str | None = None

    def to_wire(self) -> dict:
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)

    def to_cli(self, colorize: bool = False, show_rows: int = 0) -> str:
        """Format analysis response for CLI output.

        Args:
            colorize: Whether to apply ANSI colors.
            show_rows: How many retained rows to print (0 = none).
        """
        BOLD = '\033[1m'
        RED = '\033[91m'
        YELLOW = '\033[33m'
        CYAN = '\033[36m'
        GREY = '\033[90m'
        RESET = '\033[0m'

        def label(text: str) -> str:
            return f'{GREY}{text}{RESET}' if colorize else text

        lines = []

        if colorize:
            lines.append(f'{BOLD}Log Analysis{RESET}')
        else:
            lines.append('Log Analysis')

        if colorize:
            lines.append(f'{label("Path:")} {CYAN}{self.path}{RESET}')
        else:
            lines.append(f'Path: {self.path}')
        lines.append(f'{label("Time:")} {self.time:.3f}s')

        s = self.summary
        lines.append(f'{label("Lines:")} {s.lines:,}')
        lines.append(f'{label("Unique sources:")} {s.unique_sources:,}')
        if s.start and s.end:
            lines.append(f'{label("Range:")} {s.start:%Y-%m-%d %H:%M:%S} .. {s.end:%Y-%m-%d %H:%M:%S} UTC')
        else:
            lines.append(f'{label("Range:")} no valid timestamps')

        if self.timeline:
            peak = max(self.timeline, key=lambda b: b.count)
            lines.append(
                f'{label("Timeline:")} {len(self.timeline)} minute(s), '
                f'peak {peak.count} at {peak.minute:%Y-%m-%d %H:%M} UTC'
            )

        lines.append('')
        if colorize:
            lines.append(f'{BOLD}Anomalies ({len(self.anomalies)}):{RESET}')
        else:
            lines.append(f'Anomalies ({len(self.anomalies)}):')

        if not self.anomalies:
            lines.append('  none')
        for a in self.anomalies:
            conf = f'{a.confidence:.2f}'
            if colorize:
                color = RED if a.confidence >= 0.5 else YELLOW
                lines.append(f'  {color}[{a.kind}]{RESET} {GREY}conf={conf}{RESET} {a.reason}')
            else:
                lines.append(f'  [{a.kind}] conf={conf} {a.reason}')

        if show_rows > 0 and self.rows:
            lines.append('')
            lines.append(label(f'Rows (first {min(show_rows, len(self.rows))} of {len(self.rows)} retained):'))
            for row in self.rows[:show_rows]:
                ts = f'{row.ts:%Y-%m-%dT%H:%M:%SZ}' if row.ts else '-'
                cells = [ts, row.src_ip or '-', row.method or '-', row.path or '-', str(row.status or '-')]
                lines.append('  ' + '\t'.join(cells))

        if self.note:
            lines.append('')
            lines.append(label(f'Note: {self.note}'))

        return '\n'.join(lines)
