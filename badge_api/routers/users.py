"""Badge registry — register, list and remove badge holders"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from badge_api.database import get_db
from badge_api.schemas.user import UserCreate, UserOut
from badge_api.services import registry_service

router = APIRouter()


@router.post("/users", status_code=status.HTTP_201_CREATED, summary="Register a badge holder")
def register_user(body: UserCreate, db: Session = Depends(get_db)):
    """badge_id and display_name are required; every profile field is optional."""
    fields = body.model_dump()
    registry_service.register(db, fields.pop("badge_id"), fields.pop("display_name"), **fields)
    return {"message": "User created"}


@router.get("/users", response_model=list[UserOut], summary="List registrations, newest first")
def list_users(db: Session = Depends(get_db)):
    return registry_service.list_users(db)


@router.delete("/users/{badge_id}", summary="Remove one badge registration")
def remove_user(badge_id: str, db: Session = Depends(get_db)):
    registry_service.deregister(db, badge_id)
    return {"message": "User deleted", "badge_id": badge_id}


@router.delete("/users", summary="Remove every registration")
def remove_all_users(db: Session = Depends(get_db)):
    deleted = registry_service.deregister_all(db)
    return {"message": f"All users deleted ({deleted})"}
