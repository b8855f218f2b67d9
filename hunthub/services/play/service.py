"""Play session engine: start, step through, answer and finish a published hunt."""
import logging
import random

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hunthub.core.config import Settings, get_settings
from hunthub.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from hunthub.db.session import transaction, utcnow
from hunthub.models.hunt import AccessMode, Hunt
from hunthub.models.hunt_version import HuntVersion
from hunthub.models.progress import HuntProgressStatus, Progress
from hunthub.models.step import ChallengeType, Step
from hunthub.schemas.answer import AnswerPayload, AnswerType
from hunthub.schemas.challenge import Challenge
from hunthub.schemas.play import (
    DiscoverHuntOut,
    DiscoverOut,
    HintOut,
    LinkOut,
    NavigateOut,
    SessionOut,
    StepOut,
    ValidateAnswerOut,
)
from hunthub.services.ai_validation import AIValidationService
from hunthub.services.assets import AssetStore
from hunthub.services.authorization import AuthorizationService, HuntPermission
from hunthub.services.invitations import PlayerInvitationService, normalize_email
from hunthub.services.play import step_navigator as nav
from hunthub.services.play.exporter import export_hunt, export_step
from hunthub.services.play.session_manager import SessionManager
from hunthub.services.publishing import get_version
from hunthub.services.validation import ValidationContext, validate_answer

logger = logging.getLogger(__name__)

MAX_DISCOVER_LIMIT = 50


class PlayService:
    def __init__(
        self,
        db: Session,
        *,
        authz: AuthorizationService | None = None,
        invitations: PlayerInvitationService | None = None,
        assets: AssetStore | None = None,
        ai: AIValidationService | None = None,
        settings: Settings | None = None,
        rng: random.Random | None = None,
    ):
        self.db = db
        self.settings = settings or get_settings()
        self.authz = authz or AuthorizationService(db)
        self.invitations = invitations or PlayerInvitationService(db, self.authz)
        self.assets = assets or AssetStore(db, self.settings)
        self.ai = ai or AIValidationService(settings=self.settings)
        self.sessions = SessionManager(db, self.settings)
        self.rng = rng

    # -- lookups --

    def _require_version(self, hunt_id: int, version: int) -> HuntVersion:
        hunt_version = get_version(self.db, hunt_id, version)
        if hunt_version is None:
            raise NotFoundError("Hunt version not found")
        return hunt_version

    def _require_live_hunt(self, play_slug: str) -> Hunt:
        hunt = self.db.scalar(
            select(Hunt).where(Hunt.play_slug == play_slug, Hunt.is_deleted == False)  # noqa: E712
        )
        if hunt is None:
            raise NotFoundError("Hunt not found")
        if hunt.live_version is None:
            raise ForbiddenError("This hunt is not currently available for playing")
        return hunt

    def _check_player_access(self, hunt: Hunt, email: str | None, user_id: str | None) -> None:
        mode = AccessMode(hunt.access_mode)
        if mode == AccessMode.OPEN:
            return

        is_collaborator = self.authz.get_access(hunt.hunt_id, user_id) is not None
        if mode == AccessMode.COLLABORATORS_ONLY:
            if not is_collaborator:
                raise ForbiddenError("This hunt is only available to its collaborators")
            return

        if not is_collaborator and not self.invitations.is_invited(hunt.hunt_id, email):
            raise ForbiddenError("This hunt is invite-only. You need an invitation to play.")

    def _session_out(self, progress: Progress, hunt_version: HuntVersion) -> SessionOut:
        in_progress = progress.status == HuntProgressStatus.IN_PROGRESS.value
        return SessionOut(
            session_id=progress.session_id,
            hunt=export_hunt(progress.hunt_id, hunt_version),
            status=progress.status,
            current_step_index=nav.get_step_index(hunt_version.step_order, progress.current_step_id),
            current_step_id=progress.current_step_id if in_progress else None,
            total_steps=len(hunt_version.step_order),
            started_at=progress.started_at,
            completed_at=progress.completed_at,
            is_preview=progress.is_preview,
        )

    def _current_step(self, progress: Progress) -> Step:
        step = nav.get_step_by_id(self.db, progress.hunt_id, progress.version, progress.current_step_id)
        if step is None:
            raise NotFoundError("Current step not found")
        return step

    # -- discovery and sessions --

    def discover_hunts(self, page: int = 1, limit: int = 10) -> DiscoverOut:
        if page < 1 or not 1 <= limit <= MAX_DISCOVER_LIMIT:
            raise ValidationError(
                "Invalid pagination",
                [{"field": "limit", "message": f"page >= 1 and 1 <= limit <= {MAX_DISCOVER_LIMIT}"}],
            )

        live = (Hunt.live_version.is_not(None), Hunt.is_deleted == False)  # noqa: E712
        total = self.db.scalar(select(func.count(Hunt.hunt_id)).where(*live)) or 0
        rows = self.db.execute(
            select(Hunt, HuntVersion)
            .join(
                HuntVersion,
                (HuntVersion.hunt_id == Hunt.hunt_id) & (HuntVersion.version == Hunt.live_version),
                isouter=True,
            )
            .where(*live)
            .order_by(Hunt.created_at.desc(), Hunt.hunt_id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).all()

        hunts = [
            DiscoverHuntOut(
                hunt_id=hunt.hunt_id,
                name=version.name if version else "Untitled Hunt",
                description=version.description if version else None,
                total_steps=len(version.step_order) if version else 0,
                play_slug=hunt.play_slug,
            )
            for hunt, version in rows
        ]
        return DiscoverOut(hunts=hunts, total=total, page=page, limit=limit)

    def start_session(
        self, play_slug: str, player_name: str, email: str | None = None, user_id: str | None = None
    ) -> SessionOut:
        hunt = self._require_live_hunt(play_slug)
        self._check_player_access(hunt, email, user_id)

        hunt_version = self._require_version(hunt.hunt_id, hunt.live_version)
        if not hunt_version.step_order:
            raise ValidationError("This hunt has no steps to play")

        with transaction(self.db):
            progress = self.sessions.create_session(
                hunt_id=hunt.hunt_id,
                version=hunt.live_version,
                player_name=player_name.strip(),
                first_step_id=hunt_version.step_order[0],
                user_id=user_id,
                email=normalize_email(email) or None,
            )

        logger.info("Session %s started on hunt %s v%s", progress.session_id, hunt.hunt_id, progress.version)
        return self._session_out(progress, hunt_version)

    def start_preview_session(self, hunt_id: int, user_id: str) -> SessionOut:
        """Play the current draft. Creators and collaborators only."""
        access = self.authz.require_access(hunt_id, user_id, HuntPermission.VIEW)
        hunt_version = self._require_version(hunt_id, access.hunt.latest_version)
        if not hunt_version.step_order:
            raise ValidationError("Hunt has no steps to preview")

        with transaction(self.db):
            progress = self.sessions.create_session(
                hunt_id=hunt_id,
                version=access.hunt.latest_version,
                player_name="Preview",
                first_step_id=hunt_version.step_order[0],
                user_id=user_id,
                is_preview=True,
            )

        logger.info("Preview session %s started on hunt %s by %s", progress.session_id, hunt_id, user_id)
        return self._session_out(progress, hunt_version)

    def get_session(self, session_id: str) -> SessionOut:
        progress = self.sessions.require_session(session_id)
        return self._session_out(progress, self._require_version(progress.hunt_id, progress.version))

    def abandon_session(self, session_id: str) -> SessionOut:
        progress = self.sessions.require_session(session_id)
        self.sessions.validate_session_active(progress)

        with transaction(self.db):
            self.sessions.abandon_session(progress)

        return self.get_session(session_id)

    # -- steps --

    def get_step(self, session_id: str, step_id: int) -> StepOut:
        """The current step or the one right after it; anything else is forbidden."""
        progress = self.sessions.require_session(session_id)
        self.sessions.validate_session_active(progress)
        hunt_version = self._require_version(progress.hunt_id, progress.version)
        order = hunt_version.step_order

        current_step_id = progress.current_step_id
        next_step_id = nav.get_next_step_id(order, current_step_id)
        allowed = {current_step_id} if next_step_id is None else {current_step_id, next_step_id}
        if step_id not in allowed:
            raise ForbiddenError("Step not accessible from current position")

        step = nav.get_step_by_id(self.db, progress.hunt_id, progress.version, step_id)
        if step is None:
            raise NotFoundError("Step not found")

        step_progress = self.sessions.get_current_step_progress(progress) if step_id == current_step_id else None
        return self._step_out(session_id, step, order, step_progress)

    def _step_out(self, session_id: str, step: Step, order: list[int], step_progress=None) -> StepOut:
        next_step_id = nav.get_next_step_id(order, step.step_id)
        links = {"self": LinkOut(href=nav.step_href(session_id, step.step_id))}
        if next_step_id is not None:
            links["next"] = LinkOut(href=nav.step_href(session_id, next_step_id))
        links["validate"] = LinkOut(href=nav.validate_href(session_id))

        return StepOut(
            step=export_step(step, self.rng),
            step_index=nav.get_step_index(order, step.step_id),
            total_steps=len(order),
            attempts=step_progress.attempts if step_progress else 0,
            max_attempts=step.max_attempts,
            hints_used=step_progress.hints_used if step_progress else 0,
            max_hints=self.settings.max_hints_per_step,
            links=links,
        )

    def validate_answer(self, session_id: str, answer_type: AnswerType, payload: AnswerPayload) -> ValidateAnswerOut:
        """
        Grade an answer for the current step.

        The validator (including any AI call) runs before the write
        transaction. The transaction then bumps attempts, stores the
        submission and, on a correct answer, advances or completes the
        session with a compare-and-swap on the step that was graded.
        """
        progress = self.sessions.require_session(session_id)
        self.sessions.validate_session_active(progress)
        hunt_version = self._require_version(progress.hunt_id, progress.version)
        step = self._current_step(progress)
        graded_step_id = progress.current_step_id

        step_progress = self.sessions.get_current_step_progress(progress)
        if step_progress is None:
            raise NotFoundError("Session or step not found")

        expired = False
        if step.time_limit and step_progress.started_at:
            expired = (utcnow() - step_progress.started_at).total_seconds() > step.time_limit
        exhausted = bool(step.max_attempts) and step_progress.attempts >= step.max_attempts

        ctx = ValidationContext(settings=self.settings, assets=self.assets, ai=self.ai)
        result = validate_answer(
            answer_type,
            payload,
            ChallengeType(step.type),
            Challenge.model_validate(step.challenge),
            ctx,
        )

        is_complete = False
        with transaction(self.db):
            attempts = self.sessions.increment_attempts(step_progress)
            self.sessions.record_submission(
                step_progress,
                {"answer_type": answer_type.value, **payload.model_dump(mode="json", exclude_none=True)},
                result.is_correct,
                feedback=result.feedback,
                score=result.score,
                meta=result.meta,
            )

            if result.is_correct:
                next_step_id = nav.get_next_step_id(hunt_version.step_order, graded_step_id)
                if next_step_id is None:
                    self.sessions.complete_session(progress, graded_step_id)
                    is_complete = True
                else:
                    self.sessions.advance_to_next_step(progress, graded_step_id, next_step_id)

        return ValidateAnswerOut(
            correct=result.is_correct,
            feedback=result.feedback,
            attempts=attempts,
            max_attempts=step.max_attempts,
            is_complete=is_complete,
            expired=expired,
            exhausted=exhausted,
        )

    def request_hint(self, session_id: str) -> HintOut:
        progress = self.sessions.require_session(session_id)
        self.sessions.validate_session_active(progress)
        step = self._current_step(progress)
        if not step.hint:
            raise NotFoundError("No hint available for this step")

        step_progress = self.sessions.get_current_step_progress(progress)
        if step_progress is None:
            raise NotFoundError("Session not found")

        max_hints = self.settings.max_hints_per_step
        with transaction(self.db):
            hints_used = self.sessions.increment_hints_used_if_under_limit(step_progress, max_hints)
            if hints_used is None:
                raise ConflictError("You have already used your hint for this step")

        return HintOut(hint=step.hint, hints_used=hints_used, max_hints=max_hints)

    def navigate(self, session_id: str, step_id: int) -> NavigateOut:
        """Preview sessions may jump to any step."""
        progress = self.sessions.require_session(session_id)
        if not progress.is_preview:
            raise ForbiddenError("Navigation is only available in preview mode")
        self.sessions.validate_session_active(progress)

        order = self._require_version(progress.hunt_id, progress.version).step_order
        index = nav.get_step_index(order, step_id)
        if index == -1:
            raise NotFoundError("Step not found in hunt")

        with transaction(self.db):
            self.sessions.navigate_to_step(progress, step_id)

        return NavigateOut(current_step_id=step_id, current_step_index=index)
