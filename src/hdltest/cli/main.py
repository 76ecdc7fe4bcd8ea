"""hdltest CLI - hdltest command."""

import click

from hdltest import __version__
from hdltest.cli.discover import discover_command
from hdltest.cli.run import run_command
from hdltest.cli.watch import watch_command
from hdltest.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="hdltest")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """hdltest - discover and run dbt HDL simulation tests."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    # Replaced by the workspace logging config once a command loads it
    configure_logging(level="DEBUG" if verbose else None)


cli.add_command(discover_command, name="discover")
cli.add_command(run_command, name="run")
cli.add_command(watch_command, name="watch")


if __name__ == "__main__":
    cli()
