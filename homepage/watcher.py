import asyncio
from pathlib import Path
from typing import Callable, Iterable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

IGNORED_PARTS = {"__pycache__", ".git"}
IGNORED_SUFFIXES = {".pyc", ".swp", ".swx"}


def ignored(path: str) -> bool:
    p = Path(path)
    return bool(IGNORED_PARTS.intersection(p.parts)) or p.suffix in IGNORED_SUFFIXES or p.name.endswith("~")


class ChangeHandler(FileSystemEventHandler):
    """
    Forwards (path, kind) for every relevant change to callback, on the event loop.

    watchdog calls us from its observer thread; the callback always runs on
    the loop thread.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, callback: Callable[[str, str], object]):
        super().__init__()
        self.loop = loop
        self.callback = callback

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory and event.event_type == "modified":
            return
        if event.event_type in ("opened", "closed", "closed_no_write"):
            return
        path = str(event.src_path)
        if ignored(path):
            return
        self.loop.call_soon_threadsafe(self.callback, path, event.event_type)


def start_watching(paths: Iterable[Path], callback, loop=None) -> Observer:
    """Watch each existing path recursively; returns the started observer."""
    loop = loop or asyncio.get_running_loop()
    handler = ChangeHandler(loop, callback)
    observer = Observer()
    for path in paths:
        if path.exists():
            observer.schedule(handler, str(path), recursive=True)
    observer.start()
    return observer
