"""Unit tests for the bounded store-call helpers."""

import asyncio
import time

import pytest
from unittest.mock import MagicMock
from badge_api.exceptions import StoreError
from badge_api.utils.store import CommitGate, bounded, start_in_session


class TestCommitGate:
    def test_commit_wins_when_first(self):
        gate = CommitGate()
        assert gate.allow_commit() is True
        assert gate.abandon() is False
        assert gate.allow_commit() is True

    def test_abandon_wins_when_first(self):
        gate = CommitGate()
        assert gate.abandon() is True
        assert gate.allow_commit() is False


class TestBounded:
    @pytest.mark.asyncio
    async def test_result_within_timeout(self):
        session = MagicMock()
        gate = CommitGate()
        task = start_in_session(lambda: session, lambda db, g: "done", gate, "quick call")

        assert await bounded(task, gate, 1.0, "quick call") == "done"
        session.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_timeout_before_commit_fails_and_skips_commit(self):
        session = MagicMock()
        committed = []

        def work(db, gate):
            time.sleep(0.2)
            if gate.allow_commit():
                committed.append(True)
            return "late"

        gate = CommitGate()
        task = start_in_session(lambda: session, work, gate, "slow call")

        with pytest.raises(StoreError):
            await bounded(task, gate, 0.05, "slow call")
        await task

        assert committed == []
        session.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_commit_in_flight_at_timeout_returns_its_result(self):
        def work(db, gate):
            assert gate.allow_commit()
            time.sleep(0.2)
            return "committed"

        gate = CommitGate()
        task = start_in_session(MagicMock, work, gate, "committing call")

        assert await bounded(task, gate, 0.05, "committing call") == "committed"
