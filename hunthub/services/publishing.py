"""Publishing: freeze the current draft, fork the next one, prune old history.

A publish of draft V is one transaction:

1. clone the steps of V into V+1 (step ids kept),
2. create HuntVersion(V+1) as the new draft,
3. mark V published, compare-and-swap on the draft's updated_at,
4. advance Hunt.latest_version from V to V+1, compare-and-swap on both
   latest_version and the live_version read at the start,
5. prune published versions past the retention cap, never the live one.

Two publishers racing on the same draft cannot both win: the loser either
misses the updated_at swap or collides on the (hunt_id, version) unique key,
and gets a ConflictError. A release landing mid-publish fails the
live_version half of step 4, so pruning never sees a stale live pointer.
"""
import logging
from datetime import datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hunthub.core.config import Settings, get_settings
from hunthub.core.errors import ConflictError, NotFoundError, ValidationError
from hunthub.db.session import as_naive_utc, transaction, utcnow
from hunthub.models.hunt import Hunt
from hunthub.models.hunt_version import HuntVersion
from hunthub.models.step import Step
from hunthub.schemas.publishing import PublishOut, VersionOut
from hunthub.services.authorization import AuthorizationService, HuntPermission
from hunthub.services.step_cloner import clone_steps

logger = logging.getLogger(__name__)

PUBLISH_CONFLICT = "Hunt was modified by another operation. Please refresh and try again."


def get_version(db: Session, hunt_id: int, version: int) -> HuntVersion | None:
    return db.scalar(select(HuntVersion).where(HuntVersion.hunt_id == hunt_id, HuntVersion.version == version))


def count_steps(db: Session, hunt_id: int, version: int) -> int:
    return db.scalar(
        select(func.count(Step.id)).where(Step.hunt_id == hunt_id, Step.hunt_version == version)
    ) or 0


def validate_can_publish(draft: HuntVersion, step_count: int) -> None:
    if draft.is_published:
        raise ValidationError(
            "Version is already published",
            [{"field": "version", "message": f"Version {draft.version} is already published"}],
        )
    if step_count == 0 or not draft.step_order:
        raise ValidationError(
            "Cannot publish hunt with no steps",
            [{"field": "steps", "message": "Add at least one step before publishing"}],
        )


def create_draft_from(db: Session, source: HuntVersion, new_version: int) -> HuntVersion:
    now = utcnow()
    draft = HuntVersion(
        hunt_id=source.hunt_id,
        version=new_version,
        name=source.name,
        description=source.description,
        start_location_json=source.start_location_json,
        step_order_json=source.step_order_json,
        is_published=False,
        created_at=now,
        updated_at=now,
    )
    db.add(draft)
    db.flush()
    return draft


def mark_version_published(
    db: Session, hunt_id: int, version: int, expected_updated_at: datetime, user_id: str, now: datetime
) -> None:
    result = db.execute(
        update(HuntVersion)
        .where(
            HuntVersion.hunt_id == hunt_id,
            HuntVersion.version == version,
            HuntVersion.updated_at == expected_updated_at,
            HuntVersion.is_published == False,  # noqa: E712
        )
        .values(is_published=True, published_at=now, published_by=user_id, updated_at=now)
    )
    if result.rowcount == 0:
        raise ConflictError(PUBLISH_CONFLICT)


def live_version_matches(expected: int | None):
    if expected is None:
        return Hunt.live_version.is_(None)
    return Hunt.live_version == expected


def update_hunt_pointers(
    db: Session, hunt_id: int, current_version: int, new_version: int, live_version: int | None
) -> None:
    """Advance latest_version. Also guarded on the live pointer pruning relies on."""
    result = db.execute(
        update(Hunt)
        .where(
            Hunt.hunt_id == hunt_id,
            Hunt.latest_version == current_version,
            live_version_matches(live_version),
            Hunt.is_deleted == False,  # noqa: E712
        )
        .values(latest_version=new_version, updated_at=utcnow())
    )
    if result.rowcount == 0:
        raise ConflictError(PUBLISH_CONFLICT)


def prune_published_versions(db: Session, hunt_id: int, live_version: int | None, keep: int) -> list[int]:
    """Delete published versions beyond the newest `keep`, sparing the live one. Returns pruned versions."""
    published = db.scalars(
        select(HuntVersion.version)
        .where(HuntVersion.hunt_id == hunt_id, HuntVersion.is_published == True)  # noqa: E712
        .order_by(HuntVersion.version.desc())
    ).all()

    to_prune = [v for v in published[keep:] if v != live_version]
    if not to_prune:
        return []

    db.execute(
        delete(Step)
        .where(Step.hunt_id == hunt_id, Step.hunt_version.in_(to_prune))
        .execution_options(synchronize_session=False)
    )
    db.execute(
        delete(HuntVersion)
        .where(HuntVersion.hunt_id == hunt_id, HuntVersion.version.in_(to_prune))
        .execution_options(synchronize_session=False)
    )
    return to_prune


class PublishingService:
    def __init__(
        self,
        db: Session,
        authz: AuthorizationService | None = None,
        settings: Settings | None = None,
    ):
        self.db = db
        self.authz = authz or AuthorizationService(db)
        self.settings = settings or get_settings()

    def publish_hunt(self, hunt_id: int, user_id: str, expected_updated_at: datetime | None = None) -> PublishOut:
        access = self.authz.require_access(hunt_id, user_id, HuntPermission.ADMIN)
        hunt = access.hunt
        current_version = hunt.latest_version
        live_version = hunt.live_version

        draft = get_version(self.db, hunt_id, current_version)
        if draft is None:
            raise NotFoundError(f"Hunt version {current_version} not found")

        validate_can_publish(draft, count_steps(self.db, hunt_id, current_version))

        lock_token = draft.updated_at
        if expected_updated_at is not None and as_naive_utc(expected_updated_at) != lock_token:
            raise ConflictError(PUBLISH_CONFLICT)

        new_version = current_version + 1
        now = utcnow()
        try:
            with transaction(self.db):
                clone_steps(self.db, hunt_id, current_version, new_version)
                create_draft_from(self.db, draft, new_version)
                mark_version_published(self.db, hunt_id, current_version, lock_token, user_id, now)
                update_hunt_pointers(self.db, hunt_id, current_version, new_version, live_version)
                pruned = prune_published_versions(
                    self.db, hunt_id, live_version, self.settings.max_published_versions
                )
        except IntegrityError as exc:
            raise ConflictError(PUBLISH_CONFLICT) from exc

        logger.info("Published hunt %s version %s by %s; new draft %s", hunt_id, current_version, user_id, new_version)
        if pruned:
            logger.info("Pruned hunt %s versions %s", hunt_id, pruned)

        return PublishOut(
            hunt_id=hunt_id,
            published_version=current_version,
            new_draft_version=new_version,
            live_version=live_version,
            published_at=now,
            pruned_versions=pruned,
        )

    def list_versions(self, hunt_id: int, user_id: str) -> list[VersionOut]:
        """Version history, newest first, with published and live markers."""
        access = self.authz.require_access(hunt_id, user_id, HuntPermission.VIEW)

        counts = dict(
            self.db.execute(
                select(Step.hunt_version, func.count(Step.id))
                .where(Step.hunt_id == hunt_id)
                .group_by(Step.hunt_version)
            ).all()
        )
        versions = self.db.scalars(
            select(HuntVersion).where(HuntVersion.hunt_id == hunt_id).order_by(HuntVersion.version.desc())
        )
        return [
            VersionOut(
                version=v.version,
                name=v.name,
                is_published=v.is_published,
                is_live=v.version == access.hunt.live_version,
                published_at=v.published_at,
                published_by=v.published_by,
                step_count=counts.get(v.version, 0),
            )
            for v in versions
        ]
