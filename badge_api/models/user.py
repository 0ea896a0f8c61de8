"""
Registry table — one row per badge registration.
badge_id is indexed but not unique: re-registering a badge inserts another row.
Used by registry_service and, read-only, by movement_service for display names.
"""

from sqlalchemy import Column, Integer, String, DateTime
from badge_api.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    badge_id = Column(String(100), nullable=False, index=True)
    display_name = Column(String(200), nullable=False)
    given_name = Column(String(100))
    family_name = Column(String(100))
    email = Column(String(255))
    role = Column(String(100))
    department = Column(String(100))
    phone_number = Column(String(50))
    city = Column(String(100))
    organization = Column(String(200))
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<User {self.id} badge={self.badge_id} name={self.display_name}>"
