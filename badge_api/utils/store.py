# badge_api/utils/store.py
"""
Helpers that turn database failures into StoreError.

store_errors() wraps synchronous session work. start_in_session() runs a
blocking unit of work in the thread pool on a session it opens and closes
itself; bounded() waits for it with an upper time limit.

A timed-out call never commits: the worker asks its CommitGate before
committing, and the waiter closes the gate when it gives up. If the commit
was already under way when the limit hit, the waiter takes its outcome instead.
"""

import asyncio
import threading
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from badge_api.exceptions import StoreError
from badge_api.utils.logger import get_logger

logger = get_logger(__name__)


@contextmanager
def store_errors(db: Session, action: str):
    """Roll back and re-raise any SQLAlchemy failure as StoreError."""
    try:
        yield
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Store failure during {action}: {e}", exc_info=True)
        raise StoreError(str(e)) from e


class CommitGate:
    """Decided once: either the worker commits or the waiter abandons."""

    def __init__(self):
        self._lock = threading.Lock()
        self._decision = None

    def allow_commit(self) -> bool:
        with self._lock:
            if self._decision is None:
                self._decision = "commit"
            return self._decision == "commit"

    def abandon(self) -> bool:
        with self._lock:
            if self._decision is None:
                self._decision = "abandon"
            return self._decision == "abandon"


def _run_in_session(session_factory, fn, gate: CommitGate, action: str, *args):
    db = session_factory()
    try:
        with store_errors(db, action):
            return fn(db, gate, *args)
    finally:
        db.close()


def start_in_session(session_factory, fn, gate: CommitGate, action: str, *args) -> asyncio.Task:
    """Run fn(db, gate, *args) in the default thread pool on its own session."""
    return asyncio.ensure_future(
        asyncio.to_thread(_run_in_session, session_factory, fn, gate, action, *args)
    )


async def bounded(task: asyncio.Future, gate: CommitGate, timeout: float, action: str):
    """
    Wait for a store task for at most `timeout` seconds.
    On timeout the gate is closed so the worker rolls back instead of
    committing, and the request fails with StoreError.
    """
    try:
        return await asyncio.wait_for(asyncio.shield(task), timeout=timeout)
    except asyncio.TimeoutError as e:
        if gate.abandon():
            logger.error(f"Store call timed out after {timeout}s during {action}, nothing committed")
            raise StoreError(f"timeout during {action}") from e
    logger.warning(f"Store call passed {timeout}s during {action} while committing, awaiting the commit")
    return await task
