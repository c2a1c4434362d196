"""Log analysis pipeline.

One call scans the source once, runs both detectors over the retained rows,
merges their findings and returns an AnalysisResponse. Nothing outlives the
call.
"""

import logging
import os
from time import time

from tenexlog import prometheus as prom
from tenexlog.analyze import default_detectors, merge_anomalies
from tenexlog.models import AnalysisResponse, BucketModel, EventModel, SummaryModel
from tenexlog.parse import ScanResult, Source, scan_tsv
from tenexlog.settings import AnalysisSettings


logger = logging.getLogger(__name__)


def _describe_source(source: Source) -> tuple[str, int | None]:
    """Display name and size in bytes (None when unknown)."""
    if isinstance(source, (str, os.PathLike)):
        path = os.fspath(source)
        try:
            return path, os.path.getsize(path)
        except OSError:
            return path, None
    stream_name = getattr(source, 'name', None)
    return (str(stream_name) if stream_name else '<stream>'), None


def truncation_note(scan: ScanResult, keep_rows: int) -> str | None:
    if keep_rows > 0 and scan.summary.lines > keep_rows:
        return (
            f'Rows are truncated for display (showing first {keep_rows}). '
            'Summary/anomalies are computed over the scanned portion.'
        )
    return None


def analyze_source(source: Source, settings: AnalysisSettings | None = None) -> AnalysisResponse:
    """Analyze a tab-separated access log.

    Args:
        source: File path or binary stream.
        settings: Caps and detector thresholds. Defaults to AnalysisSettings().

    Returns:
        AnalysisResponse with summary, timeline, retained rows and anomalies.

    Raises:
        OSError: The source could not be read or a line exceeded the length cap.
    """
    settings = settings or AnalysisSettings()
    start_time = time()
    name, size_bytes = _describe_source(source)
    logger.info(f'Analyzing {name}')

    try:
        scan = scan_tsv(
            source,
            max_scan_lines=settings.max_scan_lines,
            keep_rows=settings.keep_rows,
            max_line_bytes=settings.max_line_bytes,
        )
    except OSError as e:
        logger.error(f'Failed to read {name}: {e}')
        prom.record_analyze_request('error', time() - start_time)
        raise

    rate_detector, sensitive_detector = default_detectors(settings)
    rate_spikes = rate_detector.detect(scan.rows)
    sensitive = sensitive_detector.detect(scan.rows)
    anomalies = merge_anomalies(rate_spikes, sensitive, settings.max_anomalies)

    elapsed = time() - start_time
    logger.info(
        f'Analyzed {name}: {scan.summary.lines} lines, {len(scan.rows)} rows retained, '
        f'{len(rate_spikes)} rate spikes, {len(sensitive)} sensitive path sources in {elapsed:.3f}s'
    )

    prom.record_scan(scan.summary.lines, len(scan.rows), scan.truncated, size_bytes)
    prom.record_anomalies([a.kind for a in anomalies])
    prom.record_analyze_request('success', elapsed)

    return AnalysisResponse(
        path=name,
        size_bytes=size_bytes,
        time=elapsed,
        summary=SummaryModel.from_summary(scan.summary),
        timeline=[BucketModel.from_bucket(b) for b in scan.timeline],
        rows=[EventModel.from_event(ev) for ev in scan.rows],
        anomalies=anomalies,
        note=truncation_note(scan, settings.keep_rows),
    )
