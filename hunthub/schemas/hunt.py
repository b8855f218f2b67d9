"""Pydantic schemas for hunt and step authoring."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from hunthub.models.hunt import AccessMode
from hunthub.models.step import ChallengeType
from hunthub.schemas.challenge import Challenge, Location


class HuntCreateIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    start_location: Location | None = None


class HuntUpdateIn(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    start_location: Location | None = None
    # optimistic lock: the draft's updated_at as last seen by the editor
    updated_at: datetime | None = None


class HuntOut(BaseModel):
    hunt_id: int
    creator_id: str
    name: str
    description: str | None = None
    start_location: Location | None = None
    play_slug: str
    play_url: str | None = None
    access_mode: AccessMode
    latest_version: int
    live_version: int | None = None
    step_order: list[int]
    is_published: bool
    released_at: datetime | None = None
    updated_at: datetime
    permission: Literal["owner", "admin", "view"] | None = None


class StepCreateIn(BaseModel):
    type: ChallengeType
    challenge: Challenge
    hint: str | None = None
    required_location: Location | None = None
    time_limit: int | None = Field(default=None, gt=0)  # seconds
    max_attempts: int | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def _type_matches_challenge(self):
        if self.challenge.kind != self.type:
            raise ValueError(f"challenge payload does not match step type {self.type.value}")
        return self


class StepUpdateIn(StepCreateIn):
    updated_at: datetime | None = None


class StepOut(BaseModel):
    step_id: int
    hunt_id: int
    hunt_version: int
    type: ChallengeType
    challenge: Challenge
    hint: str | None = None
    required_location: Location | None = None
    time_limit: int | None = None
    max_attempts: int | None = None
    updated_at: datetime


class ReorderStepsIn(BaseModel):
    step_order: list[int]


class CloneHuntIn(BaseModel):
    version: int | None = None


class CloneHuntOut(BaseModel):
    hunt_id: int
    cloned_from_hunt_id: int
    cloned_from_version: int
    cloned_at: datetime


class InvitePlayerIn(BaseModel):
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class InvitationOut(BaseModel):
    hunt_id: int
    email: str
    invited_by: str
    invited_at: datetime


class AccessModeIn(BaseModel):
    access_mode: AccessMode
