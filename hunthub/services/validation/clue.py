from hunthub.schemas.answer import AnswerPayload
from hunthub.schemas.challenge import Challenge
from hunthub.services.validation.base import ValidationContext, ValidationResult


class ClueValidator:
    """Clues have no answer; submitting one is an acknowledgement."""

    def validate(self, payload: AnswerPayload, challenge: Challenge, ctx: ValidationContext) -> ValidationResult:
        return ValidationResult(is_correct=True, feedback="Clue acknowledged")
