"""Pydantic schemas for the polymorphic step challenge.

A challenge is a tagged union: exactly one of ``clue``, ``quiz``, ``mission``
or ``task`` is populated, and it must agree with the step's ``type``. Steps are
validated here on the way in, so validators can trust the stored payload shape.
"""
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from hunthub.models.step import ChallengeType


class Location(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)
    radius: float | None = Field(default=None, gt=0)  # meters
    address: str | None = None


class Clue(BaseModel):
    title: str | None = None
    description: str | None = None


class Option(BaseModel):
    id: str = Field(min_length=1)
    text: str


class NumericRange(BaseModel):
    min: float | None = None
    max: float | None = None


class QuizValidation(BaseModel):
    mode: Literal["exact", "contains", "fuzzy", "numeric-range"] = "exact"
    case_sensitive: bool = False
    # fuzzy: minimum similarity (0..1); defaults to settings.fuzzy_match_threshold
    threshold: float | None = Field(default=None, ge=0, le=1)
    # numeric-range: max absolute difference from the expected answer
    tolerance: float | None = Field(default=None, ge=0)
    range: NumericRange | None = None
    acceptable_answers: list[str] = Field(default_factory=list)


class Quiz(BaseModel):
    title: str | None = None
    description: str | None = None
    type: Literal["choice", "input"] = "choice"
    options: list[Option] | None = None
    target_id: str | None = None
    expected_answer: str | None = None
    randomize_order: bool = False
    validation: QuizValidation | None = None

    @model_validator(mode="after")
    def _check_answer_key(self):
        if self.type == "choice":
            if not self.options:
                raise ValueError("choice quiz requires options")
            ids = [o.id for o in self.options]
            if len(set(ids)) != len(ids):
                raise ValueError("quiz option ids must be unique")
            if self.target_id not in ids:
                raise ValueError("target_id must reference one of the options")
        elif not (self.expected_answer or "").strip():
            raise ValueError("input quiz requires expected_answer")
        return self


class Mission(BaseModel):
    title: str | None = None
    description: str | None = None
    type: Literal["upload-media", "match-location"] = "match-location"
    reference_asset_ids: list[int] = Field(default_factory=list)
    target_location: Location | None = None
    ai_instructions: str | None = None

    @model_validator(mode="after")
    def _check_target(self):
        if self.type == "match-location" and self.target_location is None:
            raise ValueError("match-location mission requires target_location")
        return self


class Task(BaseModel):
    title: str | None = None
    instructions: str | None = None
    ai_instructions: str | None = None


class Challenge(BaseModel):
    clue: Clue | None = None
    quiz: Quiz | None = None
    mission: Mission | None = None
    task: Task | None = None

    @model_validator(mode="after")
    def _exactly_one_variant(self):
        populated = [name for name in ("clue", "quiz", "mission", "task") if getattr(self, name) is not None]
        if len(populated) != 1:
            raise ValueError("challenge must populate exactly one of clue, quiz, mission, task")
        return self

    @property
    def kind(self) -> ChallengeType:
        for name in ("clue", "quiz", "mission", "task"):
            if getattr(self, name) is not None:
                return ChallengeType(name)
        raise ValueError("empty challenge")

    def to_json_dict(self) -> dict:
        return self.model_dump(exclude_none=True)
