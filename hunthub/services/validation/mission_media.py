import logging

from hunthub.core.errors import NotFoundError
from hunthub.schemas.answer import AnswerPayload
from hunthub.schemas.challenge import Challenge
from hunthub.services.validation.base import ValidationContext, ValidationResult

logger = logging.getLogger(__name__)


class MissionMediaValidator:
    """
    Uploads pass once the asset exists. Audio uploads on missions with AI
    instructions are graded by the AI collaborator instead.
    """

    def validate(self, payload: AnswerPayload, challenge: Challenge, ctx: ValidationContext) -> ValidationResult:
        mission = challenge.mission
        if mission is None:
            return ValidationResult(is_correct=False, feedback="Invalid mission configuration")

        if payload.mission_media is None:
            return ValidationResult(is_correct=False, feedback="Please upload your media")

        asset = ctx.assets.find_by_id(payload.mission_media.asset_id) if ctx.assets else None
        if asset is None:
            return ValidationResult(is_correct=False, feedback="Upload not found. Please try again.")

        is_audio = (asset.mime_type or "").lower().startswith("audio/")
        if mission.ai_instructions and is_audio and ctx.ai is not None:
            try:
                audio = ctx.assets.read_bytes(asset)
            except NotFoundError:
                logger.warning("Audio asset %s has no readable content", asset.asset_id)
                return ValidationResult(is_correct=False, feedback="Upload not found. Please try again.")

            result = ctx.ai.validate_audio_response(
                audio,
                asset.mime_type,
                mission.description or mission.title or "",
                mission.ai_instructions,
            )
            return ValidationResult(
                is_correct=result.is_correct,
                feedback=result.feedback,
                score=result.confidence,
                meta=result.as_metadata(),
            )

        return ValidationResult(is_correct=True, feedback="Upload received!", meta={"assetId": asset.asset_id})
