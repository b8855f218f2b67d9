"""Test doubles and payload builders shared across test modules."""
import time

from hunthub.schemas.hunt import StepCreateIn
from hunthub.services.ai_validation.providers import ProviderVerdict

OWNER = "creator-1"


class FakeProvider:
    """Scripted AI provider: returns a verdict, raises, or sleeps past the timeout."""

    name = "fake-model"

    def __init__(self, verdict: ProviderVerdict | None = None, error: Exception | None = None, delay: float = 0.0):
        self.verdict = verdict or ProviderVerdict(is_valid=True, feedback="Nice work", confidence=0.9)
        self.error = error
        self.delay = delay
        self.calls: list[dict] = []

    def _respond(self, **kwargs) -> ProviderVerdict:
        self.calls.append(kwargs)
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.verdict

    def validate_text(self, *, user_response, instructions, ai_instructions):
        return self._respond(user_response=user_response, instructions=instructions, ai_instructions=ai_instructions)

    def validate_audio(self, *, audio, mime_type, instructions, ai_instructions):
        return self._respond(audio=audio, mime_type=mime_type, instructions=instructions, ai_instructions=ai_instructions)


# --- step payloads ---


def clue_step(**extra) -> StepCreateIn:
    return StepCreateIn(type="clue", challenge={"clue": {"title": "Start", "description": "Find the fountain"}}, **extra)


def quiz_choice_step(target_id: str = "b", randomize: bool = False, **extra) -> StepCreateIn:
    return StepCreateIn(
        type="quiz",
        challenge={
            "quiz": {
                "title": "Colour of the door?",
                "type": "choice",
                "options": [{"id": "a", "text": "Red"}, {"id": "b", "text": "Blue"}, {"id": "c", "text": "Green"}],
                "target_id": target_id,
                "randomize_order": randomize,
            }
        },
        **extra,
    )


def quiz_input_step(expected: str, mode: str = "exact", **validation) -> StepCreateIn:
    return StepCreateIn(
        type="quiz",
        challenge={
            "quiz": {
                "title": "What is carved on the stone?",
                "type": "input",
                "expected_answer": expected,
                "validation": {"mode": mode, **validation},
            }
        },
    )


def location_step(lat: float = 52.5200, lng: float = 13.4050, radius: float | None = None) -> StepCreateIn:
    target = {"lat": lat, "lng": lng}
    if radius is not None:
        target["radius"] = radius
    return StepCreateIn(
        type="mission",
        challenge={"mission": {"title": "Go to the gate", "type": "match-location", "target_location": target}},
    )


def task_step(ai_instructions: str | None = "Accept any poem about the river") -> StepCreateIn:
    return StepCreateIn(
        type="task",
        challenge={
            "task": {"title": "Write", "instructions": "Write a short poem", "ai_instructions": ai_instructions}
        },
    )
