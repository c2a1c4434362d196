"""Main CLI entry point with command groups"""

import click

from tenexlog.__version__ import __version__
from tenexlog.cli.analyze import analyze_command
from tenexlog.cli.prefixes import prefixes_command
from tenexlog.utils import setup_logging


class DefaultCommandGroup(click.Group):
    """Custom Click Group that allows a default command"""

    GROUP_FLAGS = ('--verbose', '-v')

    def parse_args(self, ctx, args):
        # During shell completion, don't redirect to default command
        if ctx.resilient_parsing:
            return super().parse_args(ctx, args)

        # Leading group flags stay with the group
        i = 0
        while i < len(args) and args[i] in self.GROUP_FLAGS:
            i += 1
        head, rest = args[:i], args[i:]

        if not rest or rest[0] in ('--help', '-h', '--version') or rest[0] in self.commands:
            return super().parse_args(ctx, args)

        # Otherwise, treat as analyze command (default)
        return super().parse_args(ctx, head + ['analyze'] + rest)


@click.group(cls=DefaultCommandGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name='tenexlog')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging on stderr')
@click.pass_context
def cli(ctx, verbose):
    """
    tenexlog - access log summary and anomaly detection.

    \b
    Commands:
      tenexlog <path>            Analyze a TSV access log (default command)
      tenexlog analyze <path>    Same, explicit
      tenexlog prefixes          List sensitive path prefixes

    \b
    Examples:
      tenexlog access.tsv
      tenexlog analyze access.tsv --json
      tenexlog -v analyze access.tsv --rows 20
    """
    setup_logging(verbose)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


cli.add_command(analyze_command, name='analyze')
cli.add_command(prefixes_command, name='prefixes')


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
