from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class ProviderUnavailable(RuntimeError):
    """Raised by a provider that cannot grade right now (disabled, quota, outage)."""


@dataclass(frozen=True)
class ProviderVerdict:
    """
    Raw grading returned by a provider.

    confidence is 0..1; transcript is only set by audio providers.
    """
    is_valid: bool
    feedback: str
    confidence: float = 0.5
    transcript: str | None = None


class TextValidationProvider(Protocol):
    name: str

    def validate_text(
        self, *, user_response: str, instructions: str, ai_instructions: str | None
    ) -> ProviderVerdict:
        ...


class AudioValidationProvider(Protocol):
    name: str

    def validate_audio(
        self, *, audio: bytes, mime_type: str, instructions: str, ai_instructions: str | None
    ) -> ProviderVerdict:
        ...
