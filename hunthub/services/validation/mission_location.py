from hunthub.schemas.answer import AnswerPayload
from hunthub.schemas.challenge import Challenge
from hunthub.services.validation.base import ValidationContext, ValidationResult
from hunthub.services.validation.geo import haversine_distance


class MissionLocationValidator:
    """Correct when the player is within the target radius (haversine distance)."""

    def validate(self, payload: AnswerPayload, challenge: Challenge, ctx: ValidationContext) -> ValidationResult:
        mission = challenge.mission
        if mission is None:
            return ValidationResult(is_correct=False, feedback="Invalid mission configuration")

        submitted = payload.mission_location
        if submitted is None:
            return ValidationResult(is_correct=False, feedback="Location data missing")

        target = mission.target_location
        if target is None:
            return ValidationResult(
                is_correct=False, feedback="Invalid mission configuration - no target location"
            )

        distance = haversine_distance(submitted.lat, submitted.lng, target.lat, target.lng)
        radius = target.radius if target.radius is not None else ctx.settings.default_location_radius_m
        meta = {"distanceMeters": round(distance, 1), "radiusMeters": radius}

        if distance <= radius:
            return ValidationResult(is_correct=True, feedback="You found it!", meta=meta)

        return ValidationResult(
            is_correct=False,
            feedback=f"You're {round(distance)}m away. Keep searching!",
            meta=meta,
        )
