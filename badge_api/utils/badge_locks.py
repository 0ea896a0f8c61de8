# badge_api/utils/badge_locks.py
"""
Per-badge mutual exclusion for the movement alternator.

The next direction is read from the badge's last movement and then appended,
so two concurrent scans of the same badge must not interleave. One asyncio.Lock
exists per badge that currently has a holder or waiters; it is dropped as soon
as nobody references it. Different badges never contend.

Only serialises requests inside one server process.
"""

import asyncio
from contextlib import asynccontextmanager


class BadgeLocks:
    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._refs: dict[str, int] = {}

    def __len__(self):
        return len(self._locks)

    def __contains__(self, badge_id):
        return badge_id in self._locks

    async def acquire(self, badge_id: str):
        lock = self._locks.get(badge_id)
        if lock is None:
            lock = self._locks[badge_id] = asyncio.Lock()
        self._refs[badge_id] = self._refs.get(badge_id, 0) + 1
        try:
            await lock.acquire()
        except BaseException:
            self._unref(badge_id)
            raise

    def release(self, badge_id: str):
        self._locks[badge_id].release()
        self._unref(badge_id)

    def _unref(self, badge_id: str):
        self._refs[badge_id] -= 1
        if self._refs[badge_id] == 0:
            del self._refs[badge_id]
            del self._locks[badge_id]

    @asynccontextmanager
    async def hold(self, badge_id: str):
        await self.acquire(badge_id)
        try:
            yield
        finally:
            self.release(badge_id)
