# badge_api/schemas/movement.py
from pydantic import BaseModel
from datetime import datetime
from typing import Literal, Optional

Direction = Literal["IN", "OUT"]
Presence = Literal["INSIDE", "OUTSIDE"]


class MovementCreate(BaseModel):
    badge_id: Optional[str] = None

    class Config:
        coerce_numbers_to_str = True


class MovementResult(BaseModel):
    badge_id: str
    direction: Direction
    display_name: Optional[str]


class MovementOut(BaseModel):
    id: int
    badge_id: str
    direction: Direction
    created_at: datetime
    display_name: Optional[str]


class BadgeHistoryOut(BaseModel):
    badge_id: str
    display_name: Optional[str]
    presence: Presence
    movements: list[MovementOut]
