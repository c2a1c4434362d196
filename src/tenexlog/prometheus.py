"""Prometheus metrics for tenexlog"""

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram, write_to_textfile

# ============================================================================
# Request Metrics
# ============================================================================

# Total number of analysis runs
analyze_requests_total = Counter(
    'tenexlog_analyze_requests_total',
    'Total number of log analysis requests',
    ['status'],  # success, error
)

analyze_duration_seconds = Histogram(
    'tenexlog_analyze_duration_seconds',
    'Time spent analyzing a log source',
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
    # 10ms to 60s - bounded by the scan cap
)


# ============================================================================
# Input Metrics
# ============================================================================

lines_scanned_total = Counter('tenexlog_lines_scanned_total', 'Total number of log lines scanned')

rows_retained_total = Counter('tenexlog_rows_retained_total', 'Total number of parsed rows retained for detection')

scan_cap_reached_total = Counter(
    'tenexlog_scan_cap_reached_total', 'Number of analyses that stopped at the scan cap before end of input'
)

file_size_bytes = Histogram(
    'tenexlog_file_size_bytes',
    'Size of analyzed log files',
    buckets=[
        1024,  # 1KB
        10_240,  # 10KB
        102_400,  # 100KB
        1_048_576,  # 1MB
        10_485_760,  # 10MB
        104_857_600,  # 100MB
        1_073_741_824,  # 1GB
    ],
)


# ============================================================================
# Detection Metrics
# ============================================================================

anomalies_detected_total = Counter(
    'tenexlog_anomalies_detected_total',
    'Total number of anomalies reported, after the merge cap',
    ['kind'],  # rate_spike, sensitive_paths
)


# ============================================================================
# Helper Functions
# ============================================================================


def record_analyze_request(status: str, duration: float) -> None:
    """Record one analysis run.

    Args:
        status: 'success' or 'error'
        duration: Wall time in seconds
    """
    analyze_requests_total.labels(status=status).inc()
    analyze_duration_seconds.observe(duration)


def record_scan(lines: int, rows: int, truncated: bool, size_bytes: int | None) -> None:
    lines_scanned_total.inc(lines)
    rows_retained_total.inc(rows)
    if truncated:
        scan_cap_reached_total.inc()
    if size_bytes is not None:
        file_size_bytes.observe(size_bytes)


def record_anomalies(kinds: list[str]) -> None:
    for kind in kinds:
        anomalies_detected_total.labels(kind=kind).inc()


def write_metrics(path: str, registry: CollectorRegistry = REGISTRY) -> None:
    """Write metrics in text exposition format (node_exporter textfile collector)."""
    write_to_textfile(path, registry)
