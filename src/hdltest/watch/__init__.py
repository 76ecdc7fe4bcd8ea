"""Filesystem change triggers for discovery."""

from hdltest.watch.watcher import FileWatcher

__all__ = ["FileWatcher"]
