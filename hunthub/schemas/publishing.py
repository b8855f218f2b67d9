"""Pydantic schemas for the publish / release workflow."""
from datetime import datetime

from pydantic import BaseModel


class PublishIn(BaseModel):
    # draft updated_at as last seen by the caller; server re-reads it when omitted
    expected_updated_at: datetime | None = None


class PublishOut(BaseModel):
    hunt_id: int
    published_version: int
    new_draft_version: int
    live_version: int | None = None
    published_at: datetime
    pruned_versions: list[int] = []


class ReleaseIn(BaseModel):
    # newest published version when omitted
    version: int | None = None
    current_live_version: int | None = None


class ReleaseOut(BaseModel):
    hunt_id: int
    live_version: int
    previous_live_version: int | None = None
    released_at: datetime
    released_by: str


class TakeOfflineIn(BaseModel):
    current_live_version: int


class TakeOfflineOut(BaseModel):
    hunt_id: int
    previous_live_version: int
    live_version: None = None


class VersionOut(BaseModel):
    version: int
    name: str
    is_published: bool
    is_live: bool
    published_at: datetime | None = None
    published_by: str | None = None
    step_count: int
