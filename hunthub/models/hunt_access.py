"""HuntAccess model: a collaborator's permission on someone else's hunt."""
from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint

from hunthub.db.session import Base, utcnow


class HuntAccess(Base):
    __tablename__ = "hunt_access"
    __table_args__ = (
        UniqueConstraint("hunt_id", "shared_with_id", name="uq_hunt_access_hunt_id_shared_with_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    hunt_id = Column(Integer, nullable=False, index=True)
    shared_with_id = Column(String(64), nullable=False, index=True)
    shared_by_id = Column(String(64), nullable=False)
    permission = Column(String(16), nullable=False)  # admin | view
    shared_at = Column(DateTime, nullable=False, default=utcnow)
