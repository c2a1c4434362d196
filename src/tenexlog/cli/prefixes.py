"""CLI command listing the active sensitive path prefixes."""

import json

import click

from tenexlog.settings import AnalysisSettings


@click.command('prefixes')
@click.option('--json', 'json_output', is_flag=True, help='Output in JSON format')
def prefixes_command(json_output: bool):
    """Show the sensitive path prefixes in match order.

    The list comes from TENEXLOG_SENSITIVE_PREFIXES (comma-separated) when
    set, otherwise the built-in default.
    """
    prefixes = AnalysisSettings.from_env().sensitive_prefixes
    if json_output:
        click.echo(json.dumps({'prefixes': list(prefixes)}, indent=2))
        return
    for prefix in prefixes:
        click.echo(prefix)
