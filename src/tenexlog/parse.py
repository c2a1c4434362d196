"""TSV access-log parsing.

Expected columns by index (tab-separated):

    0: ts      (RFC 3339 date-time with offset, e.g. 2025-08-28T10:00:00Z)
    1: src_ip
    2: dst     (hostname or IP)
    3: method
    4: path
    5: status  (int)
    6: bytes   (int, response size)
    7: ua      (user-agent)

Missing trailing columns are tolerated and leave fields at their zero value.
A line is counted even when nothing in it parses.
"""

import logging
import os
import re
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import BinaryIO

from tenexlog.settings import MAX_LINE_BYTES


logger = logging.getLogger(__name__)

_INT_RE = re.compile(r'[+-]?[0-9]+')
_RFC3339_RE = re.compile(
    r'[0-9]{4}-[0-9]{2}-[0-9]{2}[Tt][0-9]{2}:[0-9]{2}:[0-9]{2}(\.[0-9]+)?([Zz]|[+-][0-9]{2}:[0-9]{2})'
)
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

Source = str | os.PathLike | BinaryIO


class LineTooLongError(OSError):
    """A line in the source exceeds the configured length cap."""

    def __init__(self, line_number: int, max_line_bytes: int):
        super().__init__(f'line {line_number} exceeds maximum length of {max_line_bytes} bytes')
        self.line_number = line_number
        self.max_line_bytes = max_line_bytes


@dataclass(frozen=True)
class Event:
    """A single parsed log row."""

    ts: datetime | None = None  # UTC, None if unparsable
    src_ip: str = ''
    dst: str = ''
    method: str = ''
    path: str = ''
    status: int = 0
    nbytes: int = 0
    user_agent: str = ''

    @property
    def minute(self) -> datetime | None:
        if self.ts is None:
            return None
        return truncate_to_minute(self.ts)


@dataclass(frozen=True)
class Summary:
    """Aggregate stats over the scanned portion of a source.

    ``start``/``end`` are None when no line had a usable timestamp.
    """

    lines: int = 0
    unique_sources: int = 0
    start: datetime | None = None
    end: datetime | None = None


@dataclass(frozen=True)
class Bucket:
    """Event count for one UTC minute."""

    minute: datetime
    count: int


@dataclass
class ScanResult:
    summary: Summary
    timeline: list[Bucket]
    rows: list[Event]
    truncated: bool = False  # scan cap was reached before end of input


def truncate_to_minute(ts: datetime) -> datetime:
    return ts.replace(second=0, microsecond=0)


def parse_timestamp(value: str) -> datetime | None:
    """Parse an RFC 3339 timestamp and normalize it to UTC.

    Only the full ``date-time`` form is accepted: ``T`` separator, seconds
    and an explicit offset. Other ISO 8601 variants are rejected.
    """
    if not _RFC3339_RE.fullmatch(value):
        return None
    try:
        ts = datetime.fromisoformat(value.upper())
    except ValueError:
        # well-formed but out of range, e.g. month 13
        return None
    return ts.astimezone(UTC)


def _parse_int(value: str) -> int:
    if not _INT_RE.fullmatch(value):
        return 0
    n = int(value)
    if n < _INT64_MIN or n > _INT64_MAX:
        return 0
    return n


def parse_fields(parts: list[str]) -> Event:
    """Build an Event from already split columns."""
    n = len(parts)
    return Event(
        ts=parse_timestamp(parts[0]) if n > 0 else None,
        src_ip=parts[1] if n > 1 else '',
        dst=parts[2] if n > 2 else '',
        method=parts[3] if n > 3 else '',
        path=parts[4] if n > 4 else '',
        status=_parse_int(parts[5]) if n > 5 else 0,
        nbytes=_parse_int(parts[6]) if n > 6 else 0,
        user_agent=parts[7] if n > 7 else '',
    )


def parse_row(line: str) -> Event:
    """Parse one tab-separated line. Never raises on malformed content."""
    return parse_fields(line.split('\t'))


class SummaryAggregator:
    """Accumulates line count, distinct sources, time bounds and per-minute counts.

    Only rows with at least two columns and a usable timestamp contribute to
    the time bounds and the timeline. Empty source IPs are not counted as
    distinct sources.
    """

    def __init__(self):
        self.lines = 0
        self._sources: set[str] = set()
        self._start: datetime | None = None
        self._end: datetime | None = None
        self._minute_counts: dict[datetime, int] = {}

    def add_line(self, event: Event, column_count: int) -> None:
        self.lines += 1
        if column_count < 2 or event.ts is None:
            return

        ts = event.ts
        if self._start is None or ts < self._start:
            self._start = ts
        if self._end is None or ts > self._end:
            self._end = ts

        if event.src_ip:
            self._sources.add(event.src_ip)

        minute = truncate_to_minute(ts)
        self._minute_counts[minute] = self._minute_counts.get(minute, 0) + 1

    def summary(self) -> Summary:
        return Summary(
            lines=self.lines,
            unique_sources=len(self._sources),
            start=self._start,
            end=self._end,
        )

    def timeline(self) -> list[Bucket]:
        """Per-minute counts, ascending by minute."""
        return [Bucket(minute=m, count=self._minute_counts[m]) for m in sorted(self._minute_counts)]


class RowSampler:
    """Keeps the first ``keep_rows`` events (non-positive keeps everything).

    Sparse rows (no timestamp, missing columns) are retained as-is so that
    retained rows line up with input lines.
    """

    def __init__(self, keep_rows: int):
        self.keep_rows = keep_rows
        self.rows: list[Event] = []

    def offer(self, event: Event) -> None:
        if self.keep_rows <= 0 or len(self.rows) < self.keep_rows:
            self.rows.append(event)


@contextmanager
def open_source(source: Source) -> Iterator[BinaryIO]:
    """Yield a binary stream for a path or pass through an already open stream.

    Streams passed in are not closed.
    """
    if isinstance(source, (str, os.PathLike)):
        with open(source, 'rb') as f:
            yield f
    else:
        yield source


def iter_lines(stream: BinaryIO, max_line_bytes: int = MAX_LINE_BYTES) -> Iterator[str]:
    """Yield decoded lines without their line terminator.

    Raises:
        LineTooLongError: If a line is longer than ``max_line_bytes``
            (non-positive disables the check).
    """
    limit = max_line_bytes + 1 if max_line_bytes > 0 else -1
    line_number = 0
    while True:
        raw = stream.readline(limit)
        if not raw:
            return
        line_number += 1
        if raw.endswith(b'\n'):
            raw = raw[:-1]
        elif max_line_bytes > 0 and len(raw) > max_line_bytes:
            raise LineTooLongError(line_number, max_line_bytes)
        if raw.endswith(b'\r'):
            raw = raw[:-1]
        yield raw.decode('utf-8', errors='replace')


def scan_tsv(
    source: Source,
    max_scan_lines: int = 0,
    keep_rows: int = 0,
    max_line_bytes: int = MAX_LINE_BYTES,
) -> ScanResult:
    """Read a TSV source once, producing summary, timeline and retained rows.

    Args:
        source: File path or binary stream.
        max_scan_lines: Maximum number of lines inspected (non-positive = unbounded).
        keep_rows: Maximum number of parsed rows retained (non-positive = unbounded).
        max_line_bytes: Maximum line length in bytes.

    Returns:
        ScanResult with summary, ascending timeline and the first ``keep_rows`` rows.

    Raises:
        OSError: If the source cannot be opened or read, or a line is too long.
            No partial result is returned.
    """
    aggregator = SummaryAggregator()
    sampler = RowSampler(keep_rows)
    truncated = False

    with open_source(source) as stream:
        for line in iter_lines(stream, max_line_bytes):
            if max_scan_lines > 0 and aggregator.lines >= max_scan_lines:
                truncated = True
                break
            parts = line.split('\t')
            event = parse_fields(parts)
            aggregator.add_line(event, len(parts))
            sampler.offer(event)

    if truncated:
        logger.info(f'Scan cap of {max_scan_lines} lines reached, remaining input ignored')

    return ScanResult(
        summary=aggregator.summary(),
        timeline=aggregator.timeline(),
        rows=sampler.rows,
        truncated=truncated,
    )


def scan(
    source: Source, max_scan_lines: int = 0, max_line_bytes: int = MAX_LINE_BYTES
) -> tuple[Summary, list[Bucket]]:
    """Summary and timeline only."""
    # keep_rows=1: rows are discarded here, so don't buffer the whole file
    result = scan_tsv(source, max_scan_lines, keep_rows=1, max_line_bytes=max_line_bytes)
    return result.summary, result.timeline


def sample(
    source: Source, max_scan_lines: int = 0, keep_rows: int = 0, max_line_bytes: int = MAX_LINE_BYTES
) -> list[Event]:
    """First ``keep_rows`` parsed events within the scan cap."""
    return scan_tsv(source, max_scan_lines, keep_rows, max_line_bytes).rows
