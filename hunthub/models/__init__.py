from hunthub.models.asset import Asset
from hunthub.models.counter import Counter
from hunthub.models.hunt import AccessMode, Hunt
from hunthub.models.hunt_access import HuntAccess
from hunthub.models.hunt_version import HuntVersion
from hunthub.models.player_invitation import PlayerInvitation
from hunthub.models.progress import HuntProgressStatus, Progress, StepProgress
from hunthub.models.step import ChallengeType, Step
from hunthub.models.submission import Submission

__all__ = [
    "AccessMode",
    "Asset",
    "ChallengeType",
    "Counter",
    "Hunt",
    "HuntAccess",
    "HuntProgressStatus",
    "HuntVersion",
    "PlayerInvitation",
    "Progress",
    "Step",
    "StepProgress",
    "Submission",
]
