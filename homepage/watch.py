"""
Rebuilds the whole site when anything under the content directory changes.

Bursts of changes (editors often write several times per save) collapse into
one rebuild at a time; the published site is swapped in atomically, so a
failed build leaves the previous one in place.
"""
import asyncio
import sys
import traceback

from homepage.build import build_site
from homepage.rebuild import RebuildLoop
from homepage.watcher import start_watching


class SiteWatcher:
    def __init__(self, cfg: dict, build=build_site):
        self.cfg = cfg
        self._build = build
        self.loop = RebuildLoop(self.rebuild)

    async def rebuild(self):
        print("[watch] Rebuilding...", flush=True)
        try:
            await asyncio.to_thread(self._build, self.cfg)
        except Exception:
            traceback.print_exc()
            print("[watch] Build failed; keeping the previous site.", file=sys.stderr, flush=True)
        else:
            print("[watch] Build completed.", flush=True)

    def changed(self, path: str, kind: str):
        print(f"[watch] {kind} {path}", flush=True)
        self.loop.notify(path, kind)

    async def run(self):
        observer = start_watching([self.cfg["content_dir"]], self.changed)
        print(f"[watch] Watching {self.cfg['content_dir']} for changes. Ctrl+C to stop.", flush=True)
        try:
            await self.loop.trigger()
            await asyncio.Event().wait()
        finally:
            observer.stop()
            observer.join()


def main(cfg: dict) -> int:
    try:
        asyncio.run(SiteWatcher(cfg).run())
    except KeyboardInterrupt:
        print("\n[watch] Stopped.")
    return 0
