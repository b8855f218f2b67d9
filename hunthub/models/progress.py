"""Progress model: one row per play session, frozen to (hunt_id, version) at start."""
import enum

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from hunthub.db.session import Base, utcnow


class HuntProgressStatus(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class Progress(Base):
    __tablename__ = "progress"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # UUID v4, doubles as the player's bearer token
    session_id = Column(String(36), unique=True, nullable=False, index=True)
    user_id = Column(String(64), nullable=True, index=True)  # null for anonymous players
    is_anonymous = Column(Boolean, nullable=False, default=True)
    is_preview = Column(Boolean, nullable=False, default=False)
    player_name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=True)

    hunt_id = Column(Integer, nullable=False, index=True)
    version = Column(Integer, nullable=False)  # never migrates to a newer live version

    status = Column(String(16), nullable=False, default=HuntProgressStatus.IN_PROGRESS.value)
    current_step_id = Column(Integer, nullable=False)

    started_at = Column(DateTime, nullable=False, default=utcnow)
    completed_at = Column(DateTime, nullable=True)
    duration = Column(Integer, nullable=False, default=0)  # seconds

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    steps = relationship(
        "StepProgress",
        back_populates="progress",
        order_by="StepProgress.id",
        cascade="all, delete-orphan",
    )


class StepProgress(Base):
    """Per-step state inside a session. Rows are only ever appended."""

    __tablename__ = "step_progress"
    __table_args__ = (
        UniqueConstraint("progress_id", "step_id", name="uq_step_progress_progress_id_step_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    progress_id = Column(Integer, ForeignKey("progress.id"), nullable=False, index=True)
    step_id = Column(Integer, nullable=False)

    attempts = Column(Integer, nullable=False, default=0)
    completed = Column(Boolean, nullable=False, default=False)
    hints_used = Column(Integer, nullable=False, default=0)
    started_at = Column(DateTime, nullable=False, default=utcnow)
    completed_at = Column(DateTime, nullable=True)
    duration = Column(Integer, nullable=False, default=0)  # seconds

    progress = relationship("Progress", back_populates="steps")
    responses = relationship(
        "Submission",
        back_populates="step_progress",
        order_by="Submission.id",
        cascade="all, delete-orphan",
    )
