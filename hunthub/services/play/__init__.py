from hunthub.services.play.service import PlayService

__all__ = ["PlayService"]
