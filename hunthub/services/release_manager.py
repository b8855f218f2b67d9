"""Release manager: moves the hunt's live pointer between published versions."""
import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from hunthub.core.errors import ConflictError, NotFoundError, ValidationError
from hunthub.db.session import transaction, utcnow
from hunthub.models.hunt import Hunt
from hunthub.models.hunt_version import HuntVersion
from hunthub.schemas.publishing import ReleaseOut, TakeOfflineOut
from hunthub.services.authorization import AuthorizationService, HuntPermission
from hunthub.services.publishing import get_version, live_version_matches

logger = logging.getLogger(__name__)

RELEASE_CONFLICT = "Hunt was modified by another operation. Please retry with the current liveVersion."


class ReleaseManager:
    def __init__(self, db: Session, authz: AuthorizationService | None = None):
        self.db = db
        self.authz = authz or AuthorizationService(db)

    def _newest_published(self, hunt_id: int) -> int | None:
        return self.db.scalar(
            select(HuntVersion.version)
            .where(HuntVersion.hunt_id == hunt_id, HuntVersion.is_published == True)  # noqa: E712
            .order_by(HuntVersion.version.desc())
            .limit(1)
        )

    def release_hunt(
        self,
        hunt_id: int,
        user_id: str,
        version: int | None = None,
        current_live_version: int | None = None,
    ) -> ReleaseOut:
        """
        Make a published version live. Releasing an older version is a rollback.

        current_live_version is the live pointer the caller last saw and guards
        the write; None means the caller saw the hunt offline.
        """
        access = self.authz.require_access(hunt_id, user_id, HuntPermission.ADMIN)
        previous_live = access.hunt.live_version

        if version is None:
            version = self._newest_published(hunt_id)
            if version is None:
                raise ValidationError(
                    "Hunt has no published versions to release",
                    [{"field": "version", "message": "Publish the hunt before releasing it"}],
                )

        target = get_version(self.db, hunt_id, version)
        if target is None:
            raise NotFoundError(f"Version {version} not found")
        if not target.is_published:
            raise ValidationError(
                f"Version {version} is not published",
                [{"field": "version", "message": "Only published versions can be released"}],
            )

        now = utcnow()
        with transaction(self.db):
            result = self.db.execute(
                update(Hunt)
                .where(Hunt.hunt_id == hunt_id, Hunt.is_deleted == False, live_version_matches(current_live_version))  # noqa: E712
                .values(live_version=version, released_at=now, released_by=user_id, updated_at=now)
            )
            if result.rowcount == 0:
                raise ConflictError(RELEASE_CONFLICT)

        logger.info("Released hunt %s version %s (was %s) by %s", hunt_id, version, previous_live, user_id)
        return ReleaseOut(
            hunt_id=hunt_id,
            live_version=version,
            previous_live_version=previous_live,
            released_at=now,
            released_by=user_id,
        )

    def take_offline(self, hunt_id: int, user_id: str, current_live_version: int) -> TakeOfflineOut:
        access = self.authz.require_access(hunt_id, user_id, HuntPermission.ADMIN)
        if access.hunt.live_version is None:
            raise ValidationError("Hunt is not currently live")

        with transaction(self.db):
            result = self.db.execute(
                update(Hunt)
                .where(
                    Hunt.hunt_id == hunt_id,
                    Hunt.is_deleted == False,  # noqa: E712
                    Hunt.live_version == current_live_version,
                )
                .values(live_version=None, released_at=None, released_by=None, updated_at=utcnow())
            )
            if result.rowcount == 0:
                raise ConflictError(RELEASE_CONFLICT)

        logger.info("Hunt %s version %s taken offline by %s", hunt_id, current_live_version, user_id)
        return TakeOfflineOut(hunt_id=hunt_id, previous_live_version=current_live_version)
