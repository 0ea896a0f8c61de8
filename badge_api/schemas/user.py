# badge_api/schemas/user.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class UserCreate(BaseModel):
    # Required fields are checked by registry_service so a missing one is a 400
    badge_id: Optional[str] = None
    display_name: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    phone_number: Optional[str] = None
    city: Optional[str] = None
    organization: Optional[str] = None

    # Numeric badge ids are accepted and stored as text
    class Config:
        coerce_numbers_to_str = True


class UserOut(BaseModel):
    badge_id: str
    display_name: str
    given_name: Optional[str]
    family_name: Optional[str]
    email: Optional[str]
    role: Optional[str]
    department: Optional[str]
    phone_number: Optional[str]
    city: Optional[str]
    organization: Optional[str]
    created_at: datetime

    class Config:
        from_attributes = True
