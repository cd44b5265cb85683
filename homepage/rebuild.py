"""
Turns a bursty stream of change notifications into serialized rebuilds.

Any number of notifications arriving while a rebuild runs collapse into one
more rebuild. The rebuild always re-reads the whole source tree, so a change
that set ``dirty`` before a rebuild cleared it is part of that rebuild.
"""
import asyncio
from typing import Awaitable, Callable

IDLE = "IDLE"
WORKING = "WORKING"


class RebuildLoop:
    def __init__(self, rebuild: Callable[[], Awaitable[object]]):
        self._rebuild = rebuild
        self.dirty = False
        self.working = False
        self.pending = set()

    @property
    def state(self) -> str:
        return WORKING if self.working else IDLE

    async def trigger(self):
        self.dirty = True
        if self.working:
            # the active drain picks this change up
            return
        self.working = True
        try:
            while self.dirty:
                self.dirty = False
                await self._rebuild()
        finally:
            self.working = False

    def notify(self, *event) -> asyncio.Task:
        """Watcher callback; event details are ignored."""
        task = asyncio.ensure_future(self.trigger())
        # the event loop only keeps weak references to tasks
        self.pending.add(task)
        task.add_done_callback(self.pending.discard)
        return task
