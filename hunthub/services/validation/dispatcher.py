"""Routes an answer to the validator for its answer type."""
from hunthub.core.errors import ValidationError
from hunthub.models.step import ChallengeType
from hunthub.schemas.answer import ANSWER_TYPE_TO_CHALLENGE_TYPE, AnswerPayload, AnswerType
from hunthub.schemas.challenge import Challenge
from hunthub.services.validation.base import AnswerValidatorProtocol, ValidationContext, ValidationResult
from hunthub.services.validation.clue import ClueValidator
from hunthub.services.validation.mission_location import MissionLocationValidator
from hunthub.services.validation.mission_media import MissionMediaValidator
from hunthub.services.validation.quiz_choice import QuizChoiceValidator
from hunthub.services.validation.quiz_input import QuizInputValidator
from hunthub.services.validation.task import TaskValidator

VALIDATORS: dict[AnswerType, AnswerValidatorProtocol] = {
    AnswerType.CLUE: ClueValidator(),
    AnswerType.QUIZ_CHOICE: QuizChoiceValidator(),
    AnswerType.QUIZ_INPUT: QuizInputValidator(),
    AnswerType.MISSION_LOCATION: MissionLocationValidator(),
    AnswerType.MISSION_MEDIA: MissionMediaValidator(),
    AnswerType.TASK: TaskValidator(),
}


def expected_answer_types(step_type: ChallengeType) -> list[AnswerType]:
    return [a for a, c in ANSWER_TYPE_TO_CHALLENGE_TYPE.items() if c == step_type]


def validate_answer(
    answer_type: AnswerType,
    payload: AnswerPayload,
    step_type: ChallengeType,
    challenge: Challenge,
    ctx: ValidationContext,
) -> ValidationResult:
    """Reject answer types that don't fit the step, then run the matching validator."""
    expected = ANSWER_TYPE_TO_CHALLENGE_TYPE.get(answer_type)
    if expected != step_type:
        allowed = ", ".join(a.value for a in expected_answer_types(step_type))
        raise ValidationError(
            f"Invalid answer type for this step. Expected {step_type.value}, "
            f"got answer type for {expected.value if expected else answer_type}",
            [{"field": "answer_type", "message": f"Expected one of: {allowed}"}],
        )

    validator = VALIDATORS.get(answer_type)
    if validator is None:
        raise ValidationError(f"Unknown answer type: {answer_type}")
    return validator.validate(payload, challenge, ctx)
