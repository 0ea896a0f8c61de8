"""
Movement log table — append-only IN/OUT events per badge.
The autoincrement id is the ordering key; the last row for a badge
decides the direction of the next one.
"""

from sqlalchemy import Column, Integer, String, DateTime
from badge_api.database import Base


class Movement(Base):
    __tablename__ = "movements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    badge_id = Column(String(100), nullable=False, index=True)
    direction = Column(String(3), nullable=False)   # IN | OUT
    created_at = Column(DateTime, nullable=False, index=True)

    def __repr__(self):
        return f"<Movement {self.id} badge={self.badge_id} direction={self.direction}>"
