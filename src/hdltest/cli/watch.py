"""hdltest watch command - rediscover on every relevant source change."""

import asyncio
import contextlib
import signal
from pathlib import Path

import click
from rich.console import Console

from hdltest.cli.utils import load_workspace_config
from hdltest.config import HdlTestConfig
from hdltest.testing.discovery import DiscoveryEngine
from hdltest.testing.models import TestTree
from hdltest.watch import FileWatcher


async def _watch(workspace_root: Path, config: HdlTestConfig, console: Console) -> None:
    def published(tree: TestTree) -> None:
        leaves = sum(1 for root in tree.roots for _ in root.leaves())
        console.print(
            f"[green]discovered[/green] {len(tree.roots)} target(s), {leaves} runnable test(s)",
            highlight=False,
        )

    engine = DiscoveryEngine(workspace_root, config, on_publish=published)
    pending: set[asyncio.Task[TestTree | None]] = set()

    def on_change(paths: list[Path]) -> None:
        task = asyncio.create_task(engine.discover(trigger=workspace_root / paths[0]))
        pending.add(task)
        task.add_done_callback(pending.discard)

    watcher = FileWatcher(
        workspace_root,
        on_change,
        watch_patterns=config.discovery.watch_patterns,
        excluded_dirs=config.discovery.excluded_dirs,
        debounce_window=config.discovery.debounce_sec,
    )

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    with contextlib.suppress(NotImplementedError):
        loop.add_signal_handler(signal.SIGINT, stop.set)
        loop.add_signal_handler(signal.SIGTERM, stop.set)

    await engine.discover()
    await watcher.start()
    console.print(f"Watching {workspace_root} (Ctrl-C to stop)", highlight=False)
    try:
        await stop.wait()
    finally:
        await watcher.stop()
        for task in pending:
            task.cancel()


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
def watch_command(path: Path) -> None:
    """Keep the test tree up to date while sources change.

    PATH is the workspace root (default: current directory).
    """
    workspace_root = path.resolve()
    config = load_workspace_config(workspace_root)
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_watch(workspace_root, config, Console(stderr=True)))
