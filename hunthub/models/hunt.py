"""Hunt model: stable identity plus draft/live version pointers."""
import enum

from sqlalchemy import Boolean, Column, DateTime, Integer, String

from hunthub.db.session import Base, utcnow


class AccessMode(str, enum.Enum):
    OPEN = "open"
    INVITE_ONLY = "invite_only"
    COLLABORATORS_ONLY = "collaborators_only"


class Hunt(Base):
    __tablename__ = "hunts"

    # Assigned once from the "hunt" counter, never reused
    hunt_id = Column(Integer, primary_key=True, autoincrement=False)
    creator_id = Column(String(64), nullable=False, index=True)

    latest_version = Column(Integer, nullable=False, default=1)  # current draft
    live_version = Column(Integer, nullable=True, index=True)  # null = not playable
    released_at = Column(DateTime, nullable=True)
    released_by = Column(String(64), nullable=True)

    play_slug = Column(String(32), unique=True, nullable=False, index=True)
    access_mode = Column(String(32), nullable=False, default=AccessMode.OPEN.value)

    is_deleted = Column(Boolean, nullable=False, default=False)
    deleted_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    @property
    def is_live(self) -> bool:
        return self.live_version is not None
