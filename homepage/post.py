"""
Single-post build pipeline for the preview server.

Renders one blog post body at start-up and after every change under the
content directory, printing each fresh result to stdout as one JSON line:

  {"milliseconds": 12.3, "body": "<p>...</p>"}

stdout carries nothing else; diagnostics go to stderr.
"""
import asyncio
import json
import sys
import time
import traceback

from homepage.blog import get_post, post_body
from homepage.coordinator import Coordinator
from homepage.rebuild import RebuildLoop
from homepage.watcher import start_watching


def emit(result: dict, stream=None):
    stream = stream or sys.stdout
    stream.write(json.dumps(result) + "\n")
    stream.flush()


def render_work(cfg: dict, name: str):
    """Async work for the coordinator: render in a thread and time it."""

    async def work():
        start = time.perf_counter()
        body = await asyncio.to_thread(post_body, cfg, name)
        return {"milliseconds": (time.perf_counter() - start) * 1000, "body": body}

    return work


class PostPipeline:
    def __init__(self, cfg: dict, name: str, publish=emit):
        get_post(cfg, name)
        self.cfg = cfg
        self.name = name
        self.coordinator = Coordinator(publish)
        self.loop = RebuildLoop(self.rebuild)

    async def rebuild(self):
        try:
            await self.coordinator.request(render_work(self.cfg, self.name))
        except Exception:
            # the last good body stays on screen; fix the source and save again
            traceback.print_exc()
            print(f"[post] Rebuild of {self.name} failed; waiting for changes.", file=sys.stderr)

    def changed(self, path: str, kind: str):
        self.loop.notify(path, kind)

    async def run(self):
        observer = start_watching([self.cfg["content_dir"]], self.changed)
        print(f"[post] Watching {self.cfg['content_dir']} for {self.name}.", file=sys.stderr)
        try:
            await self.loop.trigger()
            # runs until the preview server terminates us
            await asyncio.Event().wait()
        finally:
            observer.stop()
            observer.join()


def main(cfg: dict, name: str) -> int:
    try:
        asyncio.run(PostPipeline(cfg, name).run())
    except KeyboardInterrupt:
        pass
    return 0
