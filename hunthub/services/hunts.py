"""Hunt authoring: the draft version and its steps."""
import json
import logging
import secrets
import string

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from hunthub.core.config import Settings, get_settings
from hunthub.core.errors import ConflictError, NotFoundError, ValidationError
from hunthub.db.session import as_naive_utc, transaction, utcnow
from hunthub.models.counter import next_sequence
from hunthub.models.hunt import AccessMode, Hunt
from hunthub.models.hunt_access import HuntAccess
from hunthub.models.hunt_version import HuntVersion
from hunthub.models.player_invitation import PlayerInvitation
from hunthub.models.step import Step
from hunthub.schemas.challenge import Challenge, Location
from hunthub.schemas.hunt import (
    CloneHuntOut,
    HuntCreateIn,
    HuntOut,
    HuntUpdateIn,
    StepCreateIn,
    StepOut,
    StepUpdateIn,
)
from hunthub.services.authorization import AuthorizationService, HuntPermission
from hunthub.services.publishing import get_version
from hunthub.services.step_cloner import copy_step, list_steps

logger = logging.getLogger(__name__)

SLUG_ALPHABET = string.ascii_lowercase + string.digits
SLUG_LENGTH = 10
DRAFT_CONFLICT = "Hunt was modified by another operation. Please refresh and try again."


def generate_play_slug() -> str:
    return "".join(secrets.choice(SLUG_ALPHABET) for _ in range(SLUG_LENGTH))


def play_url(base_url: str, play_slug: str) -> str:
    return f"{base_url.rstrip('/')}/play/{play_slug}"


def to_hunt_out(
    hunt: Hunt, version: HuntVersion, permission: HuntPermission | None = None, base_url: str | None = None
) -> HuntOut:
    return HuntOut(
        hunt_id=hunt.hunt_id,
        creator_id=hunt.creator_id,
        name=version.name,
        description=version.description,
        start_location=version.start_location,
        play_slug=hunt.play_slug,
        play_url=play_url(base_url, hunt.play_slug) if base_url else None,
        access_mode=AccessMode(hunt.access_mode),
        latest_version=hunt.latest_version,
        live_version=hunt.live_version,
        step_order=version.step_order,
        is_published=version.is_published,
        released_at=hunt.released_at,
        updated_at=version.updated_at,
        permission=permission.value if permission else None,
    )


def to_step_out(step: Step) -> StepOut:
    return StepOut(
        step_id=step.step_id,
        hunt_id=step.hunt_id,
        hunt_version=step.hunt_version,
        type=step.type,
        challenge=Challenge.model_validate(step.challenge),
        hint=step.hint,
        required_location=step.required_location,
        time_limit=step.time_limit,
        max_attempts=step.max_attempts,
        updated_at=step.updated_at,
    )


def _location_dict(location: Location | None) -> dict | None:
    return location.model_dump(exclude_none=True) if location is not None else None


class HuntService:
    def __init__(
        self,
        db: Session,
        authz: AuthorizationService | None = None,
        settings: Settings | None = None,
    ):
        self.db = db
        self.authz = authz or AuthorizationService(db)
        self.settings = settings or get_settings()

    # -- helpers --

    def _get_draft(self, hunt: Hunt) -> HuntVersion:
        draft = get_version(self.db, hunt.hunt_id, hunt.latest_version)
        if draft is None:
            raise NotFoundError(f"Hunt version {hunt.latest_version} not found")
        if draft.is_published:
            raise ValidationError("Cannot edit a published version")
        return draft

    def _get_draft_step(self, hunt: Hunt, step_id: int) -> Step:
        step = self.db.scalar(
            select(Step).where(
                Step.hunt_id == hunt.hunt_id,
                Step.hunt_version == hunt.latest_version,
                Step.step_id == step_id,
            )
        )
        if step is None:
            raise NotFoundError("Step not found")
        return step

    def _touch_draft(self, draft: HuntVersion, step_order: list[int] | None = None) -> None:
        """Bump the draft's updated_at, failing if it was published or edited since it was read."""
        values: dict = {"updated_at": utcnow()}
        if step_order is not None:
            values["step_order_json"] = json.dumps([int(s) for s in step_order])
        result = self.db.execute(
            update(HuntVersion)
            .where(
                HuntVersion.id == draft.id,
                HuntVersion.updated_at == draft.updated_at,
                HuntVersion.is_published == False,  # noqa: E712
            )
            .values(**values)
        )
        if result.rowcount == 0:
            raise ConflictError(DRAFT_CONFLICT)

    def _new_hunt(self, creator_id: str) -> Hunt:
        hunt = Hunt(
            hunt_id=next_sequence(self.db, "hunt"),
            creator_id=creator_id,
            latest_version=1,
            play_slug=generate_play_slug(),
            access_mode=AccessMode.OPEN.value,
        )
        self.db.add(hunt)
        return hunt

    # -- hunts --

    def create_hunt(self, user_id: str, data: HuntCreateIn) -> HuntOut:
        with transaction(self.db):
            hunt = self._new_hunt(user_id)
            draft = HuntVersion(
                hunt_id=hunt.hunt_id,
                version=1,
                name=data.name,
                description=data.description,
                is_published=False,
            )
            draft.start_location = _location_dict(data.start_location)
            draft.step_order = []
            self.db.add(draft)

        logger.info("Created hunt %s for %s", hunt.hunt_id, user_id)
        return to_hunt_out(hunt, draft, HuntPermission.OWNER, self.settings.player_base_url)

    def get_hunt(self, hunt_id: int, user_id: str) -> HuntOut:
        access = self.authz.require_access(hunt_id, user_id, HuntPermission.VIEW)
        version = get_version(self.db, hunt_id, access.hunt.latest_version)
        if version is None:
            raise NotFoundError(f"Hunt version {access.hunt.latest_version} not found")
        return to_hunt_out(access.hunt, version, access.permission, self.settings.player_base_url)

    def update_hunt(self, hunt_id: int, user_id: str, data: HuntUpdateIn) -> HuntOut:
        """Edit draft metadata. data.updated_at, when given, must match the draft's."""
        access = self.authz.require_access(hunt_id, user_id, HuntPermission.ADMIN)
        draft = self._get_draft(access.hunt)
        token = as_naive_utc(data.updated_at) if data.updated_at is not None else draft.updated_at

        values: dict = {"updated_at": utcnow()}
        if data.name is not None:
            values["name"] = data.name
        if "description" in data.model_fields_set:
            values["description"] = data.description
        if "start_location" in data.model_fields_set:
            location = _location_dict(data.start_location)
            values["start_location_json"] = json.dumps(location) if location is not None else None

        with transaction(self.db):
            result = self.db.execute(
                update(HuntVersion)
                .where(
                    HuntVersion.id == draft.id,
                    HuntVersion.updated_at == token,
                    HuntVersion.is_published == False,  # noqa: E712
                )
                .values(**values)
            )
            if result.rowcount == 0:
                raise ConflictError(DRAFT_CONFLICT)

        self.db.refresh(draft)
        return to_hunt_out(access.hunt, draft, access.permission, self.settings.player_base_url)

    def delete_hunt(self, hunt_id: int, user_id: str) -> None:
        """Soft-delete the hunt and drop its versions. Live hunts cannot be deleted."""
        self.authz.require_access(hunt_id, user_id, HuntPermission.OWNER)

        with transaction(self.db):
            result = self.db.execute(
                update(Hunt)
                .where(
                    Hunt.hunt_id == hunt_id,
                    Hunt.live_version.is_(None),
                    Hunt.is_deleted == False,  # noqa: E712
                )
                .values(is_deleted=True, deleted_at=utcnow())
            )
            if result.rowcount == 0:
                raise ConflictError("Cannot delete hunt: it may be live or was modified by another operation.")

            self.db.execute(delete(Step).where(Step.hunt_id == hunt_id).execution_options(synchronize_session=False))
            self.db.execute(
                delete(HuntVersion).where(HuntVersion.hunt_id == hunt_id).execution_options(synchronize_session=False)
            )
            self.db.execute(
                delete(HuntAccess).where(HuntAccess.hunt_id == hunt_id).execution_options(synchronize_session=False)
            )
            self.db.execute(
                delete(PlayerInvitation)
                .where(PlayerInvitation.hunt_id == hunt_id)
                .execution_options(synchronize_session=False)
            )

        logger.info("Deleted hunt %s by %s", hunt_id, user_id)

    def clone_hunt(self, source_hunt_id: int, user_id: str, version: int | None = None) -> CloneHuntOut:
        """Copy one version of a hunt into a new hunt owned by the caller, at version 1."""
        access = self.authz.require_access(source_hunt_id, user_id, HuntPermission.VIEW)
        source_version = version if version is not None else access.hunt.latest_version
        source = get_version(self.db, source_hunt_id, source_version)
        if source is None:
            raise NotFoundError(f"Version {source_version} not found")

        now = utcnow()
        with transaction(self.db):
            hunt = self._new_hunt(user_id)

            # New lineage: every step gets a fresh step id
            id_map: dict[int, int] = {}
            for step in list_steps(self.db, source_hunt_id, source_version):
                new_id = next_sequence(self.db, "step")
                id_map[step.step_id] = new_id
                self.db.add(copy_step(step, hunt_id=hunt.hunt_id, version=1, step_id=new_id))

            draft = HuntVersion(
                hunt_id=hunt.hunt_id,
                version=1,
                name=f"{source.name} (Copy)"[:100],
                description=source.description,
                start_location_json=source.start_location_json,
                is_published=False,
            )
            draft.step_order = [id_map[s] for s in source.step_order if s in id_map]
            self.db.add(draft)

        logger.info("Cloned hunt %s v%s into %s for %s", source_hunt_id, source_version, hunt.hunt_id, user_id)
        return CloneHuntOut(
            hunt_id=hunt.hunt_id,
            cloned_from_hunt_id=source_hunt_id,
            cloned_from_version=source_version,
            cloned_at=now,
        )

    # -- steps --

    def list_steps(self, hunt_id: int, user_id: str) -> list[StepOut]:
        """Draft steps in step_order."""
        access = self.authz.require_access(hunt_id, user_id, HuntPermission.VIEW)
        draft = get_version(self.db, hunt_id, access.hunt.latest_version)
        by_id = {s.step_id: s for s in list_steps(self.db, hunt_id, access.hunt.latest_version)}
        order = draft.step_order if draft else []
        return [to_step_out(by_id[s]) for s in order if s in by_id]

    def create_step(self, hunt_id: int, user_id: str, data: StepCreateIn) -> StepOut:
        access = self.authz.require_access(hunt_id, user_id, HuntPermission.ADMIN)
        hunt = access.hunt
        draft = self._get_draft(hunt)

        with transaction(self.db):
            step_id = next_sequence(self.db, "step")
            self._touch_draft(draft, [*draft.step_order, step_id])
            step = Step(
                step_id=step_id,
                hunt_id=hunt_id,
                hunt_version=hunt.latest_version,
                type=data.type.value,
                hint=data.hint,
                time_limit=data.time_limit,
                max_attempts=data.max_attempts,
            )
            step.challenge = data.challenge.to_json_dict()
            step.required_location = _location_dict(data.required_location)
            self.db.add(step)

        return to_step_out(step)

    def update_step(self, hunt_id: int, step_id: int, user_id: str, data: StepUpdateIn) -> StepOut:
        access = self.authz.require_access(hunt_id, user_id, HuntPermission.ADMIN)
        draft = self._get_draft(access.hunt)
        step = self._get_draft_step(access.hunt, step_id)

        if data.updated_at is not None and as_naive_utc(data.updated_at) != step.updated_at:
            raise ConflictError("Step was modified by another operation. Please refresh and try again.")

        with transaction(self.db):
            self._touch_draft(draft)
            step.type = data.type.value
            step.challenge = data.challenge.to_json_dict()
            step.hint = data.hint
            step.required_location = _location_dict(data.required_location)
            step.time_limit = data.time_limit
            step.max_attempts = data.max_attempts
            step.updated_at = utcnow()

        return to_step_out(step)

    def delete_step(self, hunt_id: int, step_id: int, user_id: str) -> None:
        access = self.authz.require_access(hunt_id, user_id, HuntPermission.ADMIN)
        draft = self._get_draft(access.hunt)
        step = self._get_draft_step(access.hunt, step_id)

        with transaction(self.db):
            self._touch_draft(draft, [s for s in draft.step_order if s != step_id])
            self.db.delete(step)

    def reorder_steps(self, hunt_id: int, step_order: list[int], user_id: str) -> HuntOut:
        access = self.authz.require_access(hunt_id, user_id, HuntPermission.ADMIN)
        draft = self._get_draft(access.hunt)

        existing = {s.step_id for s in list_steps(self.db, hunt_id, access.hunt.latest_version)}
        if len(set(step_order)) != len(step_order):
            raise ValidationError("Step order contains duplicates")
        unknown = [s for s in step_order if s not in existing]
        if unknown:
            raise ValidationError(
                "Step order references steps that are not in this hunt",
                [{"field": "step_order", "message": f"Unknown step ids: {unknown}"}],
            )
        if set(step_order) != existing:
            raise ValidationError("Step order must include every step exactly once")

        with transaction(self.db):
            self._touch_draft(draft, step_order)

        self.db.refresh(draft)
        return to_hunt_out(access.hunt, draft, access.permission, self.settings.player_base_url)
