"""Pydantic schemas for answer submissions."""
import enum
from typing import Any

from pydantic import BaseModel, Field

from hunthub.models.step import ChallengeType


class AnswerType(str, enum.Enum):
    CLUE = "clue"
    QUIZ_CHOICE = "quiz-choice"
    QUIZ_INPUT = "quiz-input"
    MISSION_LOCATION = "mission-location"
    MISSION_MEDIA = "mission-media"
    TASK = "task"


# Which challenge type each answer type may be submitted against
ANSWER_TYPE_TO_CHALLENGE_TYPE: dict[AnswerType, ChallengeType] = {
    AnswerType.CLUE: ChallengeType.CLUE,
    AnswerType.QUIZ_CHOICE: ChallengeType.QUIZ,
    AnswerType.QUIZ_INPUT: ChallengeType.QUIZ,
    AnswerType.MISSION_LOCATION: ChallengeType.MISSION,
    AnswerType.MISSION_MEDIA: ChallengeType.MISSION,
    AnswerType.TASK: ChallengeType.TASK,
}


class QuizChoiceAnswer(BaseModel):
    option_id: str


class QuizInputAnswer(BaseModel):
    answer: str


class MissionLocationAnswer(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class MissionMediaAnswer(BaseModel):
    asset_id: int


class TaskAnswer(BaseModel):
    response: str


class AnswerPayload(BaseModel):
    clue: dict[str, Any] | None = None
    quiz_choice: QuizChoiceAnswer | None = None
    quiz_input: QuizInputAnswer | None = None
    mission_location: MissionLocationAnswer | None = None
    mission_media: MissionMediaAnswer | None = None
    task: TaskAnswer | None = None


class ValidateAnswerIn(BaseModel):
    answer_type: AnswerType
    payload: AnswerPayload = Field(default_factory=AnswerPayload)
