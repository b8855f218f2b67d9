from __future__ import annotations

from .base import ProviderUnavailable, ProviderVerdict


class DisabledProvider:
    """
    Default provider when no AI backend is configured.
    Every call raises, so the service's fail-open policy decides the verdict.
    """
    name = "disabled"

    def validate_text(self, *, user_response: str, instructions: str, ai_instructions: str | None) -> ProviderVerdict:
        raise ProviderUnavailable("AI validation is not configured")

    def validate_audio(
        self, *, audio: bytes, mime_type: str, instructions: str, ai_instructions: str | None
    ) -> ProviderVerdict:
        raise ProviderUnavailable("AI validation is not configured")
