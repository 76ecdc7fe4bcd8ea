"""hdltest run command - discover, then run selected test cases."""

import asyncio
import contextlib
import signal
from pathlib import Path

import click

from hdltest.cli.utils import discovery_failed, load_workspace_config, render_diagnostics
from hdltest.config import HdlTestConfig
from hdltest.testing.discovery import DiscoveryEngine
from hdltest.testing.models import RunRequest, RunSummary
from hdltest.testing.report import ConsoleRunReport
from hdltest.testing.runner import RunOrchestrator


async def _run(
    workspace_root: Path,
    config: HdlTestConfig,
    ids: tuple[str, ...],
    exclude: tuple[str, ...],
    debug: bool,
    report: ConsoleRunReport,
) -> RunSummary:
    engine = DiscoveryEngine(workspace_root, config)
    tree = await engine.discover()
    if tree is None:
        raise discovery_failed(engine)

    try:
        request = RunRequest.from_ids(tree, ids, exclude, debug=debug)
    except KeyError as e:
        raise click.BadParameter(f"unknown test id '{e.args[0]}'", param_hint="IDS") from e

    orchestrator = RunOrchestrator(workspace_root, config, tree)
    cancel = asyncio.Event()

    loop = asyncio.get_running_loop()
    # Not available on Windows event loops
    with contextlib.suppress(NotImplementedError):
        loop.add_signal_handler(signal.SIGINT, cancel.set)
    try:
        summary = await orchestrator.run(request, cancel, report)
    finally:
        with contextlib.suppress(NotImplementedError):
            loop.remove_signal_handler(signal.SIGINT)
        orchestrator.shutdown()

    render_diagnostics(orchestrator.diagnostics)
    return summary


@click.command()
@click.argument("ids", nargs=-1)
@click.option(
    "-C",
    "--workspace",
    "path",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Workspace root (default: current directory)",
)
@click.option("-x", "--exclude", multiple=True, help="Test id to skip, with its subtree")
@click.option("--debug", is_flag=True, help="Use 'dbt run' instead of 'dbt test'")
@click.option("--output", "show_output", is_flag=True, help="Print simulator output")
@click.pass_context
def run_command(
    ctx: click.Context,
    ids: tuple[str, ...],
    path: Path,
    exclude: tuple[str, ...],
    debug: bool,
    show_output: bool,
) -> None:
    """Run test cases.

    IDS are test ids as printed by 'hdltest discover'. Without IDS every
    discovered target runs. Ctrl-C cancels the run and kills the
    simulator in progress.
    """
    workspace_root = path.resolve()
    config = load_workspace_config(workspace_root)
    report = ConsoleRunReport(show_output=show_output)

    summary = asyncio.run(_run(workspace_root, config, ids, exclude, debug, report))

    if summary.cancelled:
        click.echo("Run cancelled", err=True)
    if not summary.ok:
        ctx.exit(1)
