"""Player-safe views of hunts and steps. Answer keys never leave this module."""
import copy
import random

from hunthub.models.hunt_version import HuntVersion
from hunthub.models.step import Step
from hunthub.schemas.play import HuntMetaOut, PlayerStepOut

# Per challenge variant, keys a player must never see
HIDDEN_FIELDS = {
    "quiz": ("target_id", "expected_answer", "validation"),
    "mission": ("target_location", "ai_instructions"),
    "task": ("ai_instructions",),
}


def export_hunt(hunt_id: int, version: HuntVersion) -> HuntMetaOut:
    return HuntMetaOut(
        hunt_id=hunt_id,
        name=version.name or "Untitled Hunt",
        description=version.description,
        total_steps=len(version.step_order),
    )


def strip_challenge(challenge: dict) -> dict:
    safe = copy.deepcopy(challenge)
    for variant, hidden in HIDDEN_FIELDS.items():
        body = safe.get(variant)
        if isinstance(body, dict):
            for key in hidden:
                body.pop(key, None)
    return safe


def maybe_randomize_options(challenge: dict, rng: random.Random | None = None) -> dict:
    quiz = challenge.get("quiz")
    if not quiz or not quiz.get("randomize_order") or not quiz.get("options"):
        return challenge
    options = list(quiz["options"])
    (rng or random).shuffle(options)
    quiz["options"] = options
    return challenge


def export_step(step: Step, rng: random.Random | None = None) -> PlayerStepOut:
    challenge = maybe_randomize_options(strip_challenge(step.challenge), rng)
    return PlayerStepOut(
        step_id=step.step_id,
        type=step.type,
        challenge=challenge,
        time_limit=step.time_limit,
        max_attempts=step.max_attempts,
        has_hint=bool(step.hint),
    )
