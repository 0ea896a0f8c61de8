"""
Badge registry: registration records keyed by badge_id.
Used by the users router, and read-only by movement_service to
resolve display names.

badge_id is not unique in the store. A re-registration adds a second
row; lookups resolve to the earliest registration, deletes remove every
row for the badge.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from badge_api.exceptions import NotFoundError, ValidationError
from badge_api.models.user import User
from badge_api.utils.logger import get_logger
from badge_api.utils.store import store_errors

logger = get_logger(__name__)

PROFILE_FIELDS = (
    "given_name",
    "family_name",
    "email",
    "role",
    "department",
    "phone_number",
    "city",
    "organization",
)


def is_blank(value) -> bool:
    return value is None or not str(value).strip()


def register(db: Session, badge_id: Optional[str], display_name: Optional[str], **profile) -> User:
    """Insert one registry entry. Unknown profile keys are ignored, empty values stored as NULL."""
    if is_blank(badge_id) or is_blank(display_name):
        raise ValidationError("badge_id and display_name are required")

    user = User(
        badge_id=badge_id,
        display_name=display_name,
        created_at=datetime.utcnow(),
        **{field: profile.get(field) or None for field in PROFILE_FIELDS},
    )
    with store_errors(db, "register"):
        db.add(user)
        db.commit()
    logger.info(f"[Registry] Registered badge={badge_id} name={display_name}")
    return user


def list_users(db: Session) -> list[User]:
    """All registry entries, newest registration first."""
    with store_errors(db, "list users"):
        return db.query(User).order_by(User.id.desc()).all()


def deregister(db: Session, badge_id: str) -> int:
    with store_errors(db, "deregister"):
        deleted = db.query(User).filter(User.badge_id == badge_id).delete(synchronize_session=False)
        if not deleted:
            db.rollback()
            raise NotFoundError("User not found")
        db.commit()
    logger.info(f"[Registry] Removed badge={badge_id} ({deleted} row(s))")
    return deleted


def deregister_all(db: Session) -> int:
    with store_errors(db, "deregister all"):
        deleted = db.query(User).delete(synchronize_session=False)
        db.commit()
    logger.warning(f"[Registry] Cleared all registrations ({deleted} row(s))")
    return deleted


def lookup_display_name(db: Session, badge_id: str) -> Optional[str]:
    """Display name of the earliest registration for badge_id, or None if unregistered."""
    with store_errors(db, "lookup display name"):
        return (
            db.query(User.display_name)
            .filter(User.badge_id == badge_id)
            .order_by(User.id.asc())
            .limit(1)
            .scalar()
        )
