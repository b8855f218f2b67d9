"""Asset lookups for mission-media validation, backed by the local storage root."""
from pathlib import Path
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from hunthub.core.config import BASE_DIR, Settings, get_settings
from hunthub.core.errors import NotFoundError
from hunthub.models.asset import Asset


class AssetReader(Protocol):
    def find_by_id(self, asset_id: int) -> Asset | None: ...

    def read_bytes(self, asset: Asset) -> bytes: ...


def get_storage_root(settings: Settings | None = None) -> Path:
    raw = Path((settings or get_settings()).storage_root)
    return (raw if raw.is_absolute() else BASE_DIR / raw).resolve()


class AssetStore:
    def __init__(self, db: Session, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()

    def find_by_id(self, asset_id: int) -> Asset | None:
        return self.db.scalar(select(Asset).where(Asset.asset_id == asset_id))

    def read_bytes(self, asset: Asset) -> bytes:
        if not asset.storage_path:
            raise NotFoundError("Asset has no stored content")

        root = get_storage_root(self.settings)
        path = (root / asset.storage_path).resolve()
        if root not in path.parents:
            raise NotFoundError("Asset path is outside the storage root")
        if not path.is_file():
            raise NotFoundError("Asset content not found")
        return path.read_bytes()

    def create(
        self,
        *,
        url: str,
        mime_type: str,
        storage_path: str | None = None,
        owner_id: str | None = None,
        session_id: str | None = None,
        size: int | None = None,
    ) -> Asset:
        asset = Asset(
            url=url,
            mime_type=mime_type,
            storage_path=storage_path,
            owner_id=owner_id,
            session_id=session_id,
            size=size,
        )
        self.db.add(asset)
        self.db.commit()
        return asset
