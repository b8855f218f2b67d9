"""Progress persistence for play sessions.

Every state change is a conditional UPDATE on the row as last read
(current_step_id, status, hints_used); zero matched rows means another
request got there first and the caller receives a ConflictError.
"""
import json
import logging
from datetime import datetime, timedelta

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from hunthub.core.config import Settings, get_settings
from hunthub.core.errors import ConflictError, NotFoundError
from hunthub.core.security import generate_session_id, is_valid_session_id
from hunthub.db.session import utcnow
from hunthub.models.progress import HuntProgressStatus, Progress, StepProgress
from hunthub.models.submission import Submission

logger = logging.getLogger(__name__)

STATE_CONFLICT = "Session state changed. Please retry."


def _seconds_between(start: datetime | None, end: datetime) -> int:
    if start is None:
        return 0
    return max(0, int((end - start).total_seconds()))


class SessionManager:
    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()

    def create_session(
        self,
        *,
        hunt_id: int,
        version: int,
        player_name: str,
        first_step_id: int,
        user_id: str | None = None,
        email: str | None = None,
        is_preview: bool = False,
    ) -> Progress:
        """Add a new in-progress session with progress for the first step. Caller commits."""
        now = utcnow()
        progress = Progress(
            session_id=generate_session_id(),
            user_id=user_id,
            is_anonymous=user_id is None,
            is_preview=is_preview,
            player_name=player_name,
            email=email,
            hunt_id=hunt_id,
            version=version,
            status=HuntProgressStatus.IN_PROGRESS.value,
            current_step_id=first_step_id,
            started_at=now,
        )
        progress.steps.append(StepProgress(step_id=first_step_id, started_at=now))
        self.db.add(progress)
        self.db.flush()
        return progress

    def require_session(self, session_id: str) -> Progress:
        if not is_valid_session_id(session_id):
            raise NotFoundError("Session not found or expired")

        progress = self.db.scalar(
            select(Progress)
            .where(Progress.session_id == session_id)
            .execution_options(populate_existing=True)
        )
        if progress is None:
            raise NotFoundError("Session not found or expired")

        if progress.is_anonymous and progress.status == HuntProgressStatus.IN_PROGRESS.value:
            ttl = timedelta(days=self.settings.anonymous_session_ttl_days)
            if progress.started_at + ttl < utcnow():
                raise NotFoundError("Session not found or expired")
        return progress

    @staticmethod
    def validate_session_active(progress: Progress) -> None:
        if progress.status == HuntProgressStatus.COMPLETED.value:
            raise ConflictError("This session has already been completed")
        if progress.status == HuntProgressStatus.ABANDONED.value:
            raise ConflictError("This session has been abandoned")

    def get_step_progress(self, progress: Progress, step_id: int) -> StepProgress | None:
        return self.db.scalar(
            select(StepProgress)
            .where(StepProgress.progress_id == progress.id, StepProgress.step_id == step_id)
            .execution_options(populate_existing=True)
        )

    def get_current_step_progress(self, progress: Progress) -> StepProgress | None:
        return self.get_step_progress(progress, progress.current_step_id)

    def increment_attempts(self, step_progress: StepProgress) -> int:
        self.db.execute(
            update(StepProgress)
            .where(StepProgress.id == step_progress.id)
            .values(attempts=StepProgress.attempts + 1)
        )
        return self.db.scalar(select(StepProgress.attempts).where(StepProgress.id == step_progress.id))

    def record_submission(
        self,
        step_progress: StepProgress,
        content: dict,
        is_correct: bool,
        feedback: str | None = None,
        score: float | None = None,
        meta: dict | None = None,
    ) -> Submission:
        submission = Submission(
            step_progress=step_progress,
            submitted_at=utcnow(),
            content_json=json.dumps(content),
            is_correct=is_correct,
            score=score,
            feedback=feedback,
            meta_json=json.dumps(meta) if meta else None,
        )
        self.db.add(submission)
        self.db.flush()
        return submission

    def _mark_step_completed(self, step_progress: StepProgress, now: datetime) -> None:
        self.db.execute(
            update(StepProgress)
            .where(StepProgress.id == step_progress.id)
            .values(completed=True, completed_at=now, duration=_seconds_between(step_progress.started_at, now))
        )

    def advance_to_next_step(self, progress: Progress, current_step_id: int, next_step_id: int) -> None:
        """Move the session pointer forward, guarded on the step the caller validated."""
        now = utcnow()
        result = self.db.execute(
            update(Progress)
            .where(
                Progress.id == progress.id,
                Progress.current_step_id == current_step_id,
                Progress.status == HuntProgressStatus.IN_PROGRESS.value,
            )
            .values(current_step_id=next_step_id, updated_at=now)
        )
        if result.rowcount == 0:
            raise ConflictError(STATE_CONFLICT)

        current = self.get_step_progress(progress, current_step_id)
        if current is not None:
            self._mark_step_completed(current, now)

        if self.get_step_progress(progress, next_step_id) is None:
            self.db.add(StepProgress(progress=progress, step_id=next_step_id, started_at=now))
            self.db.flush()

    def complete_session(self, progress: Progress, current_step_id: int) -> None:
        now = utcnow()
        result = self.db.execute(
            update(Progress)
            .where(
                Progress.id == progress.id,
                Progress.current_step_id == current_step_id,
                Progress.status == HuntProgressStatus.IN_PROGRESS.value,
            )
            .values(
                status=HuntProgressStatus.COMPLETED.value,
                completed_at=now,
                duration=_seconds_between(progress.started_at, now),
                updated_at=now,
            )
        )
        if result.rowcount == 0:
            raise ConflictError(STATE_CONFLICT)

        current = self.get_step_progress(progress, current_step_id)
        if current is not None:
            self._mark_step_completed(current, now)

        logger.info("Session %s completed hunt %s v%s", progress.session_id, progress.hunt_id, progress.version)

    def increment_hints_used_if_under_limit(self, step_progress: StepProgress, max_hints: int) -> int | None:
        """Returns the new hint count, or None when the budget is already spent."""
        if max_hints <= 0:
            return None
        result = self.db.execute(
            update(StepProgress)
            .where(StepProgress.id == step_progress.id, StepProgress.hints_used < max_hints)
            .values(hints_used=StepProgress.hints_used + 1)
        )
        if result.rowcount == 0:
            return None
        return self.db.scalar(select(StepProgress.hints_used).where(StepProgress.id == step_progress.id))

    def navigate_to_step(self, progress: Progress, step_id: int) -> None:
        """Preview only: jump anywhere, creating step progress on first visit."""
        now = utcnow()
        self.db.execute(
            update(Progress)
            .where(Progress.id == progress.id)
            .values(current_step_id=step_id, updated_at=now)
        )
        if self.get_step_progress(progress, step_id) is None:
            self.db.add(StepProgress(progress=progress, step_id=step_id, started_at=now))
            self.db.flush()

    def abandon_session(self, progress: Progress) -> None:
        result = self.db.execute(
            update(Progress)
            .where(Progress.id == progress.id, Progress.status == HuntProgressStatus.IN_PROGRESS.value)
            .values(status=HuntProgressStatus.ABANDONED.value, updated_at=utcnow())
        )
        if result.rowcount == 0:
            raise ConflictError(STATE_CONFLICT)
        logger.info("Session %s abandoned", progress.session_id)
