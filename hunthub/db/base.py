"""SQLAlchemy declarative base and model imports for Alembic."""
from hunthub.db.session import Base

# Import all models so Alembic can see them
from hunthub.models.asset import Asset  # noqa: F401
from hunthub.models.counter import Counter  # noqa: F401
from hunthub.models.hunt import Hunt  # noqa: F401
from hunthub.models.hunt_access import HuntAccess  # noqa: F401
from hunthub.models.hunt_version import HuntVersion  # noqa: F401
from hunthub.models.player_invitation import PlayerInvitation  # noqa: F401
from hunthub.models.progress import Progress, StepProgress  # noqa: F401
from hunthub.models.step import Step  # noqa: F401
from hunthub.models.submission import Submission  # noqa: F401

__all__ = [
    "Base",
    "Asset",
    "Counter",
    "Hunt",
    "HuntAccess",
    "HuntVersion",
    "PlayerInvitation",
    "Progress",
    "StepProgress",
    "Step",
    "Submission",
]
