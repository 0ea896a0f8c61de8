# Badge API — Database Models
# Import all models here for SQLAlchemy discovery

from badge_api.models.user import User           # noqa
from badge_api.models.movement import Movement   # noqa
