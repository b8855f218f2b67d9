"""Free-text quiz answers: exact, contains, fuzzy and numeric-range modes.

The expected answer is tried first, then each acceptable answer under the
same mode. The first match wins.
"""
from hunthub.schemas.answer import AnswerPayload
from hunthub.schemas.challenge import Challenge, QuizValidation
from hunthub.services.validation.base import (
    GENERIC_CORRECT,
    GENERIC_INCORRECT,
    ValidationContext,
    ValidationResult,
)
from hunthub.services.validation.text_matching import normalize, parse_number, similarity


def _matches(submitted: str, expected: str, rules: QuizValidation, threshold: float) -> bool:
    if rules.mode == "numeric-range":
        return _numeric_match(submitted, expected, rules)

    got = normalize(submitted, rules.case_sensitive)
    want = normalize(expected, rules.case_sensitive)
    if not got or not want:
        return False

    if rules.mode == "contains":
        return want in got or got in want
    if rules.mode == "fuzzy":
        return similarity(got, want) >= threshold
    return got == want


def _numeric_match(submitted: str, expected: str, rules: QuizValidation) -> bool:
    value = parse_number(submitted)
    if value is None:
        return False

    if rules.range is not None and (rules.range.min is not None or rules.range.max is not None):
        if rules.range.min is not None and value < rules.range.min:
            return False
        if rules.range.max is not None and value > rules.range.max:
            return False
        target = parse_number(expected)
        if target is None or rules.tolerance is None:
            return True

    target = parse_number(expected)
    if target is None:
        return False
    return abs(value - target) <= (rules.tolerance or 0.0)


class QuizInputValidator:
    def validate(self, payload: AnswerPayload, challenge: Challenge, ctx: ValidationContext) -> ValidationResult:
        quiz = challenge.quiz
        if quiz is None:
            return ValidationResult(is_correct=False, feedback="Invalid quiz configuration")

        submitted = payload.quiz_input.answer if payload.quiz_input else ""
        if not (submitted or "").strip():
            return ValidationResult(is_correct=False, feedback="Please provide an answer")

        if not (quiz.expected_answer or "").strip():
            return ValidationResult(
                is_correct=False, feedback="Invalid quiz configuration - no expected answer"
            )

        rules = quiz.validation or QuizValidation()
        threshold = rules.threshold if rules.threshold is not None else ctx.settings.fuzzy_match_threshold

        candidates = [quiz.expected_answer, *rules.acceptable_answers]
        is_correct = any(_matches(submitted, candidate, rules, threshold) for candidate in candidates if candidate)

        return ValidationResult(
            is_correct=is_correct,
            feedback=GENERIC_CORRECT if is_correct else GENERIC_INCORRECT,
            meta={"mode": rules.mode},
        )
