"""hdltest discover command - list test cases found by dbt."""

import asyncio
import json
from pathlib import Path

import click

from hdltest.cli.utils import discovery_failed, load_workspace_config, render_tree
from hdltest.testing.discovery import DiscoveryEngine


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def discover_command(path: Path, as_json: bool) -> None:
    """Run one discovery cycle and print the test tree.

    PATH is the workspace root (default: current directory).
    """
    workspace_root = path.resolve()
    config = load_workspace_config(workspace_root)

    engine = DiscoveryEngine(workspace_root, config)
    tree = asyncio.run(engine.discover())
    if tree is None:
        raise discovery_failed(engine)

    if as_json:
        click.echo(json.dumps([root.to_dict() for root in tree.roots], indent=2))
    else:
        render_tree(tree)
