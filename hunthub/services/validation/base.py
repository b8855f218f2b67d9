"""Shared types for answer validators."""
from dataclasses import dataclass, field
from typing import Any, Protocol

from hunthub.core.config import Settings, get_settings
from hunthub.schemas.answer import AnswerPayload
from hunthub.schemas.challenge import Challenge

GENERIC_CORRECT = "Correct!"
GENERIC_INCORRECT = "That's not quite right. Try again!"


@dataclass(frozen=True)
class ValidationResult:
    is_correct: bool
    feedback: str | None = None
    score: float | None = None
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass
class ValidationContext:
    """Collaborators a validator may need; pure validators ignore it."""

    settings: Settings = field(default_factory=get_settings)
    assets: Any = None  # AssetReader
    ai: Any = None  # AIValidationService


class AnswerValidatorProtocol(Protocol):
    def validate(self, payload: AnswerPayload, challenge: Challenge, ctx: ValidationContext) -> ValidationResult:
        ...
