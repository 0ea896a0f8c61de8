"""Unit tests for the per-badge lock table."""

import asyncio
import pytest
from badge_api.utils.badge_locks import BadgeLocks


class TestBadgeLocks:
    @pytest.mark.asyncio
    async def test_same_badge_is_serialised(self):
        locks = BadgeLocks()
        events = []

        async def worker(name):
            async with locks.hold("B1"):
                events.append(f"{name}-start")
                await asyncio.sleep(0.01)
                events.append(f"{name}-end")

        await asyncio.gather(worker("a"), worker("b"))

        assert events in (
            ["a-start", "a-end", "b-start", "b-end"],
            ["b-start", "b-end", "a-start", "a-end"],
        )

    @pytest.mark.asyncio
    async def test_different_badges_overlap(self):
        locks = BadgeLocks()
        inside = set()
        overlapped = []

        async def worker(badge):
            async with locks.hold(badge):
                inside.add(badge)
                await asyncio.sleep(0.01)
                overlapped.append(len(inside) > 1)
                inside.discard(badge)

        await asyncio.gather(worker("B1"), worker("B2"))

        assert any(overlapped)

    @pytest.mark.asyncio
    async def test_idle_locks_are_dropped(self):
        locks = BadgeLocks()

        async with locks.hold("B1"):
            assert "B1" in locks
            assert len(locks) == 1

        assert "B1" not in locks
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_lock_released_after_error(self):
        locks = BadgeLocks()

        with pytest.raises(RuntimeError):
            async with locks.hold("B1"):
                raise RuntimeError("boom")

        assert len(locks) == 0
        async with locks.hold("B1"):
            pass
