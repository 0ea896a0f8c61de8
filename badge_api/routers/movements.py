"""
Badge scans and movement history.
POST /movements — records the next IN/OUT for a badge.
GET  /movements — full log, newest first, with registry names.
Store work runs on sessions owned by MovementLog, not the request.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from badge_api.schemas.movement import BadgeHistoryOut, MovementCreate, MovementOut, MovementResult
from badge_api.services.movement_service import MovementLog

router = APIRouter()


def get_movement_log(request: Request) -> MovementLog:
    return request.app.state.movement_log


@router.post("/movements", response_model=MovementResult, summary="Record a badge scan")
async def report_movement(body: MovementCreate, log: MovementLog = Depends(get_movement_log)):
    """First scan of a badge is IN, then the direction alternates."""
    return await log.report_movement(body.badge_id)


@router.get("/movements", response_model=list[MovementOut], summary="Movement history, newest first")
async def list_movements(
    limit: Optional[int] = Query(None, ge=1),
    log: MovementLog = Depends(get_movement_log),
):
    return await log.history(limit)


@router.get("/movements/{badge_id}", response_model=BadgeHistoryOut, summary="One badge's history and presence")
async def badge_movements(badge_id: str, log: MovementLog = Depends(get_movement_log)):
    return await log.badge_history(badge_id)


@router.delete("/movements", summary="Clear the movement log")
async def clear_movements(log: MovementLog = Depends(get_movement_log)):
    deleted = await log.clear()
    return {"message": f"All movements deleted ({deleted})"}
