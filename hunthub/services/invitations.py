"""Player invitations and hunt access modes."""
import logging

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from hunthub.core.errors import ConflictError, NotFoundError
from hunthub.models.hunt import AccessMode, Hunt
from hunthub.models.player_invitation import PlayerInvitation
from hunthub.services.authorization import AuthorizationService, HuntPermission

logger = logging.getLogger(__name__)


def normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


class PlayerInvitationService:
    def __init__(self, db: Session, authz: AuthorizationService | None = None):
        self.db = db
        self.authz = authz or AuthorizationService(db)

    def is_invited(self, hunt_id: int, email: str | None) -> bool:
        email_norm = normalize_email(email)
        if not email_norm:
            return False
        row = self.db.scalar(
            select(PlayerInvitation.id).where(
                PlayerInvitation.hunt_id == hunt_id, PlayerInvitation.email == email_norm
            )
        )
        return row is not None

    def invite_player(self, hunt_id: int, email: str, user_id: str) -> PlayerInvitation:
        self.authz.require_access(hunt_id, user_id, HuntPermission.ADMIN)
        email_norm = normalize_email(email)

        if self.is_invited(hunt_id, email_norm):
            raise ConflictError("Player is already invited")

        invitation = PlayerInvitation(hunt_id=hunt_id, email=email_norm, invited_by=user_id)
        self.db.add(invitation)
        self.db.commit()
        logger.info("Invited player to hunt %s", hunt_id)
        return invitation

    def list_invitations(self, hunt_id: int, user_id: str) -> list[PlayerInvitation]:
        self.authz.require_access(hunt_id, user_id, HuntPermission.VIEW)
        return list(
            self.db.scalars(
                select(PlayerInvitation)
                .where(PlayerInvitation.hunt_id == hunt_id)
                .order_by(PlayerInvitation.invited_at.desc(), PlayerInvitation.id.desc())
            )
        )

    def revoke_invitation(self, hunt_id: int, email: str, user_id: str) -> None:
        self.authz.require_access(hunt_id, user_id, HuntPermission.ADMIN)
        result = self.db.execute(
            delete(PlayerInvitation).where(
                PlayerInvitation.hunt_id == hunt_id, PlayerInvitation.email == normalize_email(email)
            )
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise NotFoundError("Invitation not found")
        self.db.commit()

    def update_access_mode(self, hunt_id: int, access_mode: AccessMode, user_id: str) -> None:
        self.authz.require_access(hunt_id, user_id, HuntPermission.ADMIN)
        self.db.execute(
            update(Hunt)
            .where(Hunt.hunt_id == hunt_id, Hunt.is_deleted == False)  # noqa: E712
            .values(access_mode=AccessMode(access_mode).value)
        )
        self.db.commit()
