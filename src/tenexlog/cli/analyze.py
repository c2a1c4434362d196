"""CLI command for analyzing a TSV access log."""

import sys

import click

from tenexlog import prometheus as prom
from tenexlog.analyzer import analyze_source
from tenexlog.settings import AnalysisSettings


@click.command('analyze')
@click.argument('path', type=click.Path(exists=True, dir_okay=False, allow_dash=True))
@click.option('--max-scan-lines', type=int, default=None, help='Maximum lines to scan (<=0: unbounded, default: 100000)')
@click.option('--keep-rows', type=int, default=None, help='Maximum rows retained for detection (<=0: unbounded, default: 5000)')
@click.option('--max-anomalies', type=int, default=None, help='Maximum anomalies reported (<=0: unbounded, default: 50)')
@click.option('--max-line-bytes', type=int, default=None, help='Maximum line length in bytes (default: 1 MiB)')
@click.option('--spike-floor', type=int, default=None, help='Minimum per-minute count for a rate spike (default: 10)')
@click.option('--spike-z', 'spike_z_threshold', type=float, default=None, help='Z-score threshold (default: 2.0)')
@click.option('--spike-multiplier', type=float, default=None, help='Multiple of baseline that flags a spike (default: 2.5)')
@click.option('--min-hits', 'sensitive_min_hits', type=int, default=None, help='Sensitive hits that flag a source (default: 5)')
@click.option(
    '--min-unique',
    'sensitive_min_unique',
    type=int,
    default=None,
    help='Distinct sensitive prefixes that flag a source (default: 2)',
)
@click.option(
    '--sensitive-prefix',
    'sensitive_prefixes',
    multiple=True,
    help='Sensitive path prefix (repeatable, replaces the default list)',
)
@click.option('--rows', 'show_rows', type=int, default=0, help='Print the first N retained rows')
@click.option('--json', 'json_output', is_flag=True, help='Output in JSON format')
@click.option('--no-color', is_flag=True, help='Disable colored output')
@click.option('--metrics-file', type=click.Path(dir_okay=False, writable=True), help='Write Prometheus metrics to file')
def analyze_command(
    path: str,
    max_scan_lines: int | None,
    keep_rows: int | None,
    max_anomalies: int | None,
    max_line_bytes: int | None,
    spike_floor: int | None,
    spike_z_threshold: float | None,
    spike_multiplier: float | None,
    sensitive_min_hits: int | None,
    sensitive_min_unique: int | None,
    sensitive_prefixes: tuple[str, ...],
    show_rows: int,
    json_output: bool,
    no_color: bool,
    metrics_file: str | None,
):
    """Summarize a tab-separated access log and report anomalies.

    Columns: ts, src_ip, dst, method, path, status, bytes, ua.
    PATH may be '-' to read from stdin.

    \b
    Examples:
        tenexlog analyze access.tsv
        tenexlog access.tsv --json
        tenexlog analyze access.tsv --min-hits 3 --sensitive-prefix /admin --sensitive-prefix /.env
        cat access.tsv | tenexlog analyze -

    \b
    Settings can also come from the environment:
        TENEXLOG_MAX_SCAN_LINES, TENEXLOG_KEEP_ROWS, TENEXLOG_MAX_ANOMALIES,
        TENEXLOG_SPIKE_FLOOR, TENEXLOG_SENSITIVE_MIN_HITS, TENEXLOG_SENSITIVE_PREFIXES, ...
    """
    settings = AnalysisSettings.from_env().with_overrides(
        max_scan_lines=max_scan_lines,
        keep_rows=keep_rows,
        max_anomalies=max_anomalies,
        max_line_bytes=max_line_bytes,
        spike_floor=spike_floor,
        spike_z_threshold=spike_z_threshold,
        spike_multiplier=spike_multiplier,
        sensitive_min_hits=sensitive_min_hits,
        sensitive_min_unique=sensitive_min_unique,
        sensitive_prefixes=sensitive_prefixes,
    )

    source = click.get_binary_stream('stdin') if path == '-' else path

    try:
        result = analyze_source(source, settings)
    except OSError as e:
        click.echo(f'Error: {path}: {e}', err=True)
        sys.exit(1)
    finally:
        if metrics_file:
            prom.write_metrics(metrics_file)

    if json_output:
        click.echo(result.to_json())
    else:
        colorize = not no_color and sys.stdout.isatty()
        click.echo(result.to_cli(colorize=colorize, show_rows=show_rows))
