from hunthub.schemas.answer import AnswerPayload
from hunthub.schemas.challenge import Challenge
from hunthub.services.ai_validation import FALLBACK_FEEDBACK
from hunthub.services.validation.base import ValidationContext, ValidationResult


class TaskValidator:
    """Free-text tasks. Graded by the AI collaborator when the task has instructions."""

    def validate(self, payload: AnswerPayload, challenge: Challenge, ctx: ValidationContext) -> ValidationResult:
        task = challenge.task
        if task is None:
            return ValidationResult(is_correct=False, feedback="Invalid task configuration")

        response = (payload.task.response if payload.task else "").strip()
        if not response:
            return ValidationResult(is_correct=False, feedback="Please provide a response")

        if ctx.ai is None or not (task.instructions or task.ai_instructions):
            return ValidationResult(is_correct=True, feedback=FALLBACK_FEEDBACK)

        result = ctx.ai.validate_task_response(response, task.instructions or "", task.ai_instructions)
        return ValidationResult(
            is_correct=result.is_correct,
            feedback=result.feedback,
            score=result.confidence,
            meta=result.as_metadata(),
        )
