from hunthub.schemas.answer import AnswerPayload
from hunthub.schemas.challenge import Challenge
from hunthub.services.validation.base import (
    GENERIC_CORRECT,
    GENERIC_INCORRECT,
    ValidationContext,
    ValidationResult,
)


class QuizChoiceValidator:
    """Compares the submitted option id against the quiz's target id."""

    def validate(self, payload: AnswerPayload, challenge: Challenge, ctx: ValidationContext) -> ValidationResult:
        quiz = challenge.quiz
        if quiz is None or not quiz.options:
            return ValidationResult(is_correct=False, feedback="Invalid quiz configuration")

        option_id = payload.quiz_choice.option_id if payload.quiz_choice else None
        if not option_id:
            return ValidationResult(is_correct=False, feedback="Please select an answer")

        if option_id not in {option.id for option in quiz.options}:
            return ValidationResult(is_correct=False, feedback="Unknown option selected")

        is_correct = option_id == quiz.target_id
        return ValidationResult(
            is_correct=is_correct,
            feedback=GENERIC_CORRECT if is_correct else GENERIC_INCORRECT,
        )
