"""Pydantic schemas for player sessions. Nothing here may carry answer keys."""
from datetime import datetime

from pydantic import BaseModel, Field

from hunthub.models.progress import HuntProgressStatus
from hunthub.models.step import ChallengeType


class StartSessionIn(BaseModel):
    player_name: str = Field(min_length=1, max_length=50)
    email: str | None = Field(default=None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class HuntMetaOut(BaseModel):
    hunt_id: int
    name: str
    description: str | None = None
    total_steps: int


class SessionOut(BaseModel):
    session_id: str
    hunt: HuntMetaOut
    status: HuntProgressStatus
    current_step_index: int
    current_step_id: int | None = None
    total_steps: int
    started_at: datetime
    completed_at: datetime | None = None
    is_preview: bool = False


class PlayerStepOut(BaseModel):
    """Step as the player sees it: answers, AI instructions and targets stripped."""

    step_id: int
    type: ChallengeType
    challenge: dict
    time_limit: int | None = None
    max_attempts: int | None = None
    has_hint: bool = False


class LinkOut(BaseModel):
    href: str


class StepOut(BaseModel):
    step: PlayerStepOut
    step_index: int
    total_steps: int
    attempts: int = 0
    max_attempts: int | None = None
    hints_used: int = 0
    max_hints: int
    links: dict[str, LinkOut] = Field(serialization_alias="_links")


class ValidateAnswerOut(BaseModel):
    correct: bool
    feedback: str | None = None
    attempts: int
    max_attempts: int | None = None
    is_complete: bool = False
    expired: bool = False
    exhausted: bool = False


class HintOut(BaseModel):
    hint: str
    hints_used: int
    max_hints: int


class NavigateOut(BaseModel):
    current_step_id: int
    current_step_index: int


class DiscoverHuntOut(BaseModel):
    hunt_id: int
    name: str
    description: str | None = None
    total_steps: int
    play_slug: str


class DiscoverOut(BaseModel):
    hunts: list[DiscoverHuntOut]
    total: int
    page: int
    limit: int
