"""PlayerInvitation model: emails allowed to play an invite-only hunt."""
from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint

from hunthub.db.session import Base, utcnow


class PlayerInvitation(Base):
    __tablename__ = "player_invitations"
    __table_args__ = (
        UniqueConstraint("hunt_id", "email", name="uq_player_invitations_hunt_id_email"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    hunt_id = Column(Integer, nullable=False, index=True)
    email = Column(String(255), nullable=False)  # stored lower-cased and trimmed
    invited_by = Column(String(64), nullable=False)
    invited_at = Column(DateTime, nullable=False, default=utcnow)
