"""Hunt permission checks: owner > admin > view."""
import enum
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from hunthub.core.errors import ForbiddenError, NotFoundError
from hunthub.models.hunt import Hunt
from hunthub.models.hunt_access import HuntAccess


class HuntPermission(str, enum.Enum):
    OWNER = "owner"
    ADMIN = "admin"
    VIEW = "view"


PERMISSION_LEVELS = {
    HuntPermission.VIEW: 1,
    HuntPermission.ADMIN: 3,
    HuntPermission.OWNER: 5,
}


@dataclass
class AccessContext:
    hunt: Hunt
    user_id: str
    permission: HuntPermission


def has_permission(actual: HuntPermission, required: HuntPermission) -> bool:
    return PERMISSION_LEVELS[actual] >= PERMISSION_LEVELS[required]


class AuthorizationService:
    def __init__(self, db: Session):
        self.db = db

    def get_hunt(self, hunt_id: int) -> Hunt | None:
        return self.db.scalar(select(Hunt).where(Hunt.hunt_id == hunt_id, Hunt.is_deleted == False))  # noqa: E712

    def get_access(self, hunt_id: int, user_id: str | None) -> AccessContext | None:
        """Return the caller's access to a hunt, or None when they have none."""
        hunt = self.get_hunt(hunt_id)
        if hunt is None or not user_id:
            return None

        if hunt.creator_id == user_id:
            return AccessContext(hunt=hunt, user_id=user_id, permission=HuntPermission.OWNER)

        share = self.db.scalar(
            select(HuntAccess).where(HuntAccess.hunt_id == hunt_id, HuntAccess.shared_with_id == user_id)
        )
        if share is None:
            return None
        return AccessContext(hunt=hunt, user_id=user_id, permission=HuntPermission(share.permission))

    def require_access(self, hunt_id: int, user_id: str, required: HuntPermission) -> AccessContext:
        if self.get_hunt(hunt_id) is None:
            raise NotFoundError("Hunt not found")

        access = self.get_access(hunt_id, user_id)
        if access is None:
            raise ForbiddenError("User does not have access to this hunt")

        if not has_permission(access.permission, required):
            raise ForbiddenError(
                f"{required.value} permission required (you have {access.permission.value})"
            )
        return access

    def share_hunt(self, hunt_id: int, owner_id: str, shared_with_id: str, permission: HuntPermission) -> HuntAccess:
        """Grant a collaborator admin or view access. Only the owner may share."""
        self.require_access(hunt_id, owner_id, HuntPermission.OWNER)
        if permission == HuntPermission.OWNER:
            raise ForbiddenError("Ownership cannot be shared")

        share = self.db.scalar(
            select(HuntAccess).where(HuntAccess.hunt_id == hunt_id, HuntAccess.shared_with_id == shared_with_id)
        )
        if share is None:
            share = HuntAccess(hunt_id=hunt_id, shared_with_id=shared_with_id, shared_by_id=owner_id)
            self.db.add(share)
        share.permission = permission.value
        self.db.commit()
        return share
