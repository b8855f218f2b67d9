"""Asset model: uploaded media (creator reference images, player mission uploads)."""
from sqlalchemy import Column, DateTime, Integer, String

from hunthub.db.session import Base, utcnow


class Asset(Base):
    __tablename__ = "assets"

    asset_id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(64), nullable=True, index=True)  # creator uploads
    session_id = Column(String(36), nullable=True, index=True)  # player uploads
    url = Column(String(1024), nullable=False)
    mime_type = Column(String(64), nullable=False)
    # relative to settings.storage_root
    storage_path = Column(String(1024), nullable=True)
    size = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
