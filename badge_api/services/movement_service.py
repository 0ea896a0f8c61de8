"""
Movement log: alternating IN/OUT events per badge.

How it works:
  - A scan (report_movement) reads the badge's last movement, flips it
    (no movement or OUT → IN, IN → OUT) and appends the new row
  - Presence (INSIDE / OUTSIDE) is never stored; it is derived from the last row
  - Read + append + commit run under a per-badge lock so concurrent scans of
    one badge still alternate; scans of different badges run in parallel
  - Waiting for the lock and the store work are each bounded by
    STORE_TIMEOUT_SECONDS; a scan that times out is rolled back, never committed
  - Display names come from the registry and are optional: unregistered
    badges are logged with display_name = None
"""

import asyncio
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from badge_api.config import Settings
from badge_api.exceptions import StoreError, ValidationError
from badge_api.models.movement import Movement
from badge_api.models.user import User
from badge_api.services.registry_service import is_blank, lookup_display_name
from badge_api.utils.badge_locks import BadgeLocks
from badge_api.utils.logger import get_logger
from badge_api.utils.store import CommitGate, bounded, start_in_session

logger = get_logger(__name__)

IN = "IN"
OUT = "OUT"
INSIDE = "INSIDE"
OUTSIDE = "OUTSIDE"


def next_direction(last_direction: Optional[str]) -> str:
    """OUT only when the badge was last seen going IN."""
    return OUT if last_direction == IN else IN


def presence_for(last_direction: Optional[str]) -> str:
    return INSIDE if last_direction == IN else OUTSIDE


def _display_name_column():
    # Earliest registration wins when a badge is registered more than once
    return (
        select(User.display_name)
        .where(User.badge_id == Movement.badge_id)
        .order_by(User.id.asc())
        .limit(1)
        .correlate(Movement)
        .scalar_subquery()
        .label("display_name")
    )


def _as_dict(movement: Movement, display_name: Optional[str]) -> dict:
    return {
        "id": movement.id,
        "badge_id": movement.badge_id,
        "direction": movement.direction,
        "created_at": movement.created_at,
        "display_name": display_name,
    }


def last_direction(db: Session, badge_id: str) -> Optional[str]:
    return (
        db.query(Movement.direction)
        .filter(Movement.badge_id == badge_id)
        .order_by(Movement.id.desc())
        .limit(1)
        .scalar()
    )


class MovementLog:
    """
    Movement operations. Each one runs its store work in the thread pool on a
    session opened from `session_factory` and closed by the worker itself.
    """

    def __init__(self, config: Settings, session_factory, locks: BadgeLocks = None):
        self.timeout = config.STORE_TIMEOUT_SECONDS
        self.session_factory = session_factory
        self.locks = locks or BadgeLocks()

    # ── Blocking store work (runs in the thread pool) ──────────────────────
    def _append_next(self, db: Session, gate: CommitGate, badge_id: str) -> Optional[dict]:
        direction = next_direction(last_direction(db, badge_id))
        display_name = lookup_display_name(db, badge_id)
        db.add(Movement(badge_id=badge_id, direction=direction, created_at=datetime.utcnow()))
        if not gate.allow_commit():
            db.rollback()
            logger.warning(f"[Movement] badge={badge_id} scan abandoned after timeout, rolled back")
            return None
        db.commit()
        return {"badge_id": badge_id, "direction": direction, "display_name": display_name}

    def _history(self, db: Session, gate: CommitGate, limit: Optional[int]) -> list[dict]:
        q = db.query(Movement, _display_name_column()).order_by(Movement.id.desc())
        if limit:
            q = q.limit(limit)
        return [_as_dict(m, name) for m, name in q.all()]

    def _badge_history(self, db: Session, gate: CommitGate, badge_id: str) -> dict:
        rows = (
            db.query(Movement)
            .filter(Movement.badge_id == badge_id)
            .order_by(Movement.id.desc())
            .all()
        )
        display_name = lookup_display_name(db, badge_id)
        return {
            "badge_id": badge_id,
            "display_name": display_name,
            "presence": presence_for(rows[0].direction if rows else None),
            "movements": [_as_dict(m, display_name) for m in rows],
        }

    def _clear(self, db: Session, gate: CommitGate) -> Optional[int]:
        deleted = db.query(Movement).delete(synchronize_session=False)
        if not gate.allow_commit():
            db.rollback()
            return None
        db.commit()
        return deleted

    async def _run(self, fn, action: str, *args):
        gate = CommitGate()
        task = start_in_session(self.session_factory, fn, gate, action, *args)
        return await bounded(task, gate, self.timeout, action)

    # ── Public operations ──────────────────────────────────────────────────
    async def report_movement(self, badge_id: Optional[str]) -> dict:
        if is_blank(badge_id):
            raise ValidationError("badge_id is required")

        try:
            await asyncio.wait_for(self.locks.acquire(badge_id), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"[Movement] badge={badge_id} still busy after {self.timeout}s, scan rejected")
            raise StoreError(f"timeout waiting for badge {badge_id}") from e

        gate = CommitGate()
        try:
            task = start_in_session(self.session_factory, self._append_next, gate, "report movement", badge_id)
        except BaseException:
            self.locks.release(badge_id)
            raise
        # Released when the store work really finishes, even if we stop waiting
        task.add_done_callback(lambda t: self._finish(t, badge_id))

        result = await bounded(task, gate, self.timeout, "report movement")
        logger.info(
            f"[Movement] badge={badge_id} direction={result['direction']} "
            f"name={result['display_name']}"
        )
        return result

    def _finish(self, task, badge_id: str):
        self.locks.release(badge_id)
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"[Movement] badge={badge_id} store task failed: {task.exception()}")

    async def history(self, limit: Optional[int] = None) -> list[dict]:
        return await self._run(self._history, "movement history", limit)

    async def badge_history(self, badge_id: Optional[str]) -> dict:
        if is_blank(badge_id):
            raise ValidationError("badge_id is required")
        return await self._run(self._badge_history, "badge history", badge_id)

    async def clear(self) -> int:
        deleted = await self._run(self._clear, "clear movements")
        logger.warning(f"[Movement] Cleared movement log ({deleted} row(s))")
        return deleted
