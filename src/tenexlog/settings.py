"""Analysis configuration.

All thresholds and caps used by the scanner and the detectors live here so
that a deployment can tune them without touching detector code. Values can
be loaded from ``TENEXLOG_*`` environment variables and overridden per call.
"""

from dataclasses import dataclass, replace

from tenexlog.utils import get_float_env, get_int_env, get_list_env


DEFAULT_SENSITIVE_PREFIXES: tuple[str, ...] = (
    '/admin',
    '/login',
    '/wp-admin',
    '/wp-login',
    '/xmlrpc.php',
    '/.git',
    '/.env',
    '/.DS_Store',
    '/.well-known',
    '/server-status',
    '/phpmyadmin',
    '/manager',
    '/actuator',
    '/console',
)

MAX_LINE_BYTES = 1024 * 1024


@dataclass(frozen=True)
class AnalysisSettings:
    """Immutable knobs for one analysis run.

    Caps (``max_scan_lines``, ``keep_rows``, ``max_anomalies``,
    ``spike_keep_top``) treat non-positive values as unbounded.
    ``spike_keep_top=None`` means "use ``max_anomalies``".
    """

    max_scan_lines: int = 100_000
    keep_rows: int = 5_000
    max_anomalies: int = 50
    max_line_bytes: int = MAX_LINE_BYTES

    # Rate-spike detector
    spike_floor: int = 10
    spike_z_threshold: float = 2.0
    spike_multiplier: float = 2.5
    spike_flat_z: float = 3.0
    spike_keep_top: int | None = None

    # Sensitive-path detector
    sensitive_min_hits: int = 5
    sensitive_min_unique: int = 2
    sensitive_prefixes: tuple[str, ...] = DEFAULT_SENSITIVE_PREFIXES

    @property
    def effective_spike_keep_top(self) -> int:
        if self.spike_keep_top is None:
            return self.max_anomalies
        return self.spike_keep_top

    def with_overrides(self, **overrides) -> 'AnalysisSettings':
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if 'sensitive_prefixes' in changes:
            changes['sensitive_prefixes'] = tuple(changes['sensitive_prefixes'])
            if not changes['sensitive_prefixes']:
                del changes['sensitive_prefixes']
        return replace(self, **changes)

    @classmethod
    def from_env(cls) -> 'AnalysisSettings':
        """Build settings from TENEXLOG_* environment variables.

        Unset or unparsable variables keep the built-in default.
        """
        defaults = cls()
        keep_top_raw = get_int_env('TENEXLOG_SPIKE_KEEP_TOP', 0)
        return cls(
            max_scan_lines=get_int_env('TENEXLOG_MAX_SCAN_LINES', defaults.max_scan_lines),
            keep_rows=get_int_env('TENEXLOG_KEEP_ROWS', defaults.keep_rows),
            max_anomalies=get_int_env('TENEXLOG_MAX_ANOMALIES', defaults.max_anomalies),
            max_line_bytes=get_int_env('TENEXLOG_MAX_LINE_BYTES', defaults.max_line_bytes),
            spike_floor=get_int_env('TENEXLOG_SPIKE_FLOOR', defaults.spike_floor),
            spike_z_threshold=get_float_env('TENEXLOG_SPIKE_Z_THRESHOLD', defaults.spike_z_threshold),
            spike_multiplier=get_float_env('TENEXLOG_SPIKE_MULTIPLIER', defaults.spike_multiplier),
            spike_flat_z=get_float_env('TENEXLOG_SPIKE_FLAT_Z', defaults.spike_flat_z),
            spike_keep_top=keep_top_raw if keep_top_raw > 0 else None,
            sensitive_min_hits=get_int_env('TENEXLOG_SENSITIVE_MIN_HITS', defaults.sensitive_min_hits),
            sensitive_min_unique=get_int_env('TENEXLOG_SENSITIVE_MIN_UNIQUE', defaults.sensitive_min_unique),
            sensitive_prefixes=get_list_env('TENEXLOG_SENSITIVE_PREFIXES', defaults.sensitive_prefixes),
        )
