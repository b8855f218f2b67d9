"""Request dependencies: the creator's identity and per-request services."""
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from hunthub.core.errors import UnauthorizedError
from hunthub.core.security import verify_access_token
from hunthub.db.session import get_db
from hunthub.services.ai_validation import AIValidationService
from hunthub.services.hunts import HuntService
from hunthub.services.invitations import PlayerInvitationService
from hunthub.services.play import PlayService
from hunthub.services.publishing import PublishingService
from hunthub.services.release_manager import ReleaseManager

DbSession = Annotated[Session, Depends(get_db)]


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


def get_optional_user_id(authorization: Annotated[str | None, Header()] = None) -> str | None:
    """Return the creator id if a valid bearer token is present; else None."""
    token = _bearer_token(authorization)
    return verify_access_token(token) if token else None


def get_current_user_id(user_id: Annotated[str | None, Depends(get_optional_user_id)]) -> str:
    if user_id is None:
        raise UnauthorizedError("Missing or invalid bearer token")
    return user_id


def get_ai_service() -> AIValidationService:
    return AIValidationService()


def get_hunt_service(db: DbSession) -> HuntService:
    return HuntService(db)


def get_publishing_service(db: DbSession) -> PublishingService:
    return PublishingService(db)


def get_release_manager(db: DbSession) -> ReleaseManager:
    return ReleaseManager(db)


def get_invitation_service(db: DbSession) -> PlayerInvitationService:
    return PlayerInvitationService(db)


def get_play_service(
    db: DbSession,
    ai: Annotated[AIValidationService, Depends(get_ai_service)],
) -> PlayService:
    return PlayService(db, ai=ai)


CurrentUser = Annotated[str, Depends(get_current_user_id)]
OptionalUser = Annotated[str | None, Depends(get_optional_user_id)]
