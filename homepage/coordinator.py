"""
Single-flight freshness gate for rebuilds.

Every request bumps a version counter before its work starts. When the work
finishes, its result is published only if no newer request was made in the
meantime, so a slow stale build can never overwrite a faster fresh one. Stale
work is not cancelled; it runs to completion and its result is dropped.
"""
import asyncio
from typing import Any, Awaitable, Callable

Work = Callable[[], Awaitable[Any]]


class Coordinator:
    def __init__(self, publish: Callable[[Any], None]):
        self.version = 0
        self._publish = publish

    async def request(self, work: Work) -> bool:
        """Run work and publish its result if it is still the newest; return whether it was."""
        self.version += 1
        version = self.version
        result = await work()
        if self.version != version:
            return False
        self._publish(result)
        return True

    def request_nowait(self, work: Work) -> asyncio.Task:
        return asyncio.ensure_future(self.request(work))
