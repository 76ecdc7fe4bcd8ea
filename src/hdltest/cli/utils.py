"""CLI utilities."""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from hdltest.config import HdlTestConfig, load_config
from hdltest.core.errors import ConfigError
from hdltest.core.logging import configure_logging, get_log_file_path
from hdltest.diagnostics import DiagnosticCollection, Severity
from hdltest.testing.discovery import DiscoveryEngine
from hdltest.testing.models import TestNode, TestTree


def load_workspace_config(workspace_root: Path) -> HdlTestConfig:
    """Load config for *workspace_root* and apply its logging section.

    Config errors become CLI errors. ``hdltest -v`` forces DEBUG on every
    configured output.
    """
    try:
        config = load_config(workspace_root)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    ctx = click.get_current_context(silent=True)
    verbose = bool(ctx is not None and (ctx.obj or {}).get("verbose"))
    configure_logging(config.logging, level="DEBUG" if verbose else None)
    return config


def discovery_failed(engine: DiscoveryEngine) -> click.ClickException:
    """CLI error for a discovery cycle that published nothing."""
    error = engine.last_error
    reason = error.message if error is not None else f"'{engine.command}' returned nothing"
    message = f"Discovery failed: {reason}"
    if (log_file := get_log_file_path()) is not None:
        message += f" (details in {log_file})"
    return click.ClickException(message)


def _add_branch(parent: Tree, node: TestNode) -> None:
    label = f"{escape(node.label)} [dim]{escape(node.node_id)}[/dim]"
    if node.source is not None:
        line = node.source.range.start.line + 1
        label += f" [cyan]{escape(node.source.path.name)}:{line}[/cyan]"
    branch = parent.add(label)
    for child in node.children:
        _add_branch(branch, child)


def render_tree(tree: TestTree, console: Console | None = None) -> None:
    """Print the discovery tree, one branch per simulation target."""
    console = console or Console()
    if not tree.roots:
        console.print("[yellow]No simulation targets found[/yellow]")
        return

    leaves = sum(1 for root in tree.roots for _ in root.leaves())
    top = Tree(f"[bold]{len(tree.roots)} target(s), {leaves} runnable test(s)[/bold]")
    for root in tree.roots:
        _add_branch(top, root)
    console.print(top, highlight=False)


_SEVERITY_STYLE = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
}


def render_diagnostics(diagnostics: DiagnosticCollection, console: Console | None = None) -> None:
    """Print ``path:line[:col]: severity: message`` for every recorded diagnostic."""
    if not len(diagnostics):
        return
    console = console or Console(stderr=True)
    for diag in diagnostics:
        where = f"{diag.path}:{diag.line}"
        if diag.column is not None:
            where += f":{diag.column}"
        style = _SEVERITY_STYLE[diag.severity]
        code = f" [{diag.code}]" if diag.code else ""
        console.print(
            f"{escape(where)}: [{style}]{diag.severity.value}[/{style}]"
            f"{escape(code)}: {escape(diag.message)}",
            highlight=False,
        )
