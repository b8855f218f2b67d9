from hunthub.services.hunts import HuntService
from hunthub.services.play import PlayService
from hunthub.services.publishing import PublishingService
from hunthub.services.release_manager import ReleaseManager

__all__ = ["HuntService", "PlayService", "PublishingService", "ReleaseManager"]
