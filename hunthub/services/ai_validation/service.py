"""AI-backed grading for task responses and audio mission uploads.

Provider calls run on a worker thread with a hard timeout. Whatever happens to
the call is captured as an ``AIOutcome``; ``resolve_outcome`` is the single
place that decides what a failure means for the player. Today that decision is
fail-open: a timeout or provider error counts as a correct answer so AI
availability never blocks game progress.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from typing import Any, Callable

from hunthub.core.config import Settings, get_settings
from hunthub.core.errors import ServiceUnavailableError
from hunthub.services.ai_validation.providers import (
    AudioValidationProvider,
    ProviderVerdict,
    TextValidationProvider,
    get_provider,
)

logger = logging.getLogger(__name__)

MAX_RESPONSE_CHARS = 500
MAX_INSTRUCTIONS_CHARS = 2000
FALLBACK_FEEDBACK = "Response received!"

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="ai-validation")


class AIValidationTimeout(ServiceUnavailableError):
    error = "ai_validation_timeout"


@dataclass(frozen=True)
class AIOutcome:
    """Either a provider verdict or the error that prevented one."""

    model: str
    verdict: ProviderVerdict | None = None
    error: Exception | None = None
    processing_time_ms: int = 0


@dataclass(frozen=True)
class AIValidationResult:
    is_correct: bool
    feedback: str
    confidence: float | None = None
    ai_model: str | None = None
    processing_time_ms: int | None = None
    fallback_used: bool = False
    transcript: str | None = None
    error: str | None = None

    def as_metadata(self) -> dict[str, Any]:
        meta: dict[str, Any] = {"aiModel": self.ai_model, "fallbackUsed": self.fallback_used}
        if self.processing_time_ms is not None:
            meta["processingTimeMs"] = self.processing_time_ms
        if self.transcript:
            meta["transcript"] = self.transcript
        if self.error:
            meta["error"] = self.error
        return meta


def resolve_outcome(outcome: AIOutcome) -> AIValidationResult:
    """Fail-open policy: any failure becomes a correct, generically-worded verdict."""
    if outcome.verdict is not None:
        verdict = outcome.verdict
        return AIValidationResult(
            is_correct=verdict.is_valid,
            feedback=verdict.feedback,
            confidence=verdict.confidence,
            ai_model=outcome.model,
            processing_time_ms=outcome.processing_time_ms,
            transcript=verdict.transcript,
        )

    logger.warning(
        "AI validation via %s failed after %sms, failing open: %r",
        outcome.model,
        outcome.processing_time_ms,
        outcome.error,
    )
    return AIValidationResult(
        is_correct=True,
        feedback=FALLBACK_FEEDBACK,
        ai_model=outcome.model,
        processing_time_ms=outcome.processing_time_ms,
        fallback_used=True,
        error=type(outcome.error).__name__ if outcome.error else None,
    )


def _truncate(value: str | None, limit: int) -> str | None:
    if value is None:
        return None
    if len(value) > limit:
        logger.warning("AI validation input truncated to %s chars", limit)
    return value[:limit]


class AIValidationService:
    def __init__(
        self,
        text_provider: TextValidationProvider | None = None,
        audio_provider: AudioValidationProvider | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.text_provider = text_provider or get_provider(self.settings.ai_provider)
        self.audio_provider = audio_provider or get_provider(self.settings.ai_provider)

    @property
    def timeout_seconds(self) -> float:
        return self.settings.ai_validation_timeout_ms / 1000.0

    def run_with_timeout(self, model: str, call: Callable[[], ProviderVerdict]) -> AIOutcome:
        started = time.monotonic()
        future = _executor.submit(call)
        try:
            verdict = future.result(timeout=self.timeout_seconds)
        except FutureTimeout:
            future.cancel()
            error: Exception = AIValidationTimeout(
                f"AI validation timeout after {self.settings.ai_validation_timeout_ms}ms"
            )
            return AIOutcome(model=model, error=error, processing_time_ms=_elapsed_ms(started))
        except Exception as exc:  # provider failures of any kind are reported, not raised
            error = ServiceUnavailableError(f"AI provider {model} failed: {exc}")
            error.__cause__ = exc
            return AIOutcome(model=model, error=error, processing_time_ms=_elapsed_ms(started))
        return AIOutcome(model=model, verdict=verdict, processing_time_ms=_elapsed_ms(started))

    def validate_task_response(
        self, user_response: str, instructions: str, ai_instructions: str | None = None
    ) -> AIValidationResult:
        provider = self.text_provider
        response = _truncate(user_response, MAX_RESPONSE_CHARS) or ""
        safe_instructions = _truncate(instructions, MAX_INSTRUCTIONS_CHARS) or ""
        safe_ai_instructions = _truncate(ai_instructions, MAX_INSTRUCTIONS_CHARS)

        outcome = self.run_with_timeout(
            provider.name,
            lambda: provider.validate_text(
                user_response=response,
                instructions=safe_instructions,
                ai_instructions=safe_ai_instructions,
            ),
        )
        return resolve_outcome(outcome)

    def validate_audio_response(
        self, audio: bytes, mime_type: str, instructions: str, ai_instructions: str | None = None
    ) -> AIValidationResult:
        provider = self.audio_provider
        safe_instructions = _truncate(instructions, MAX_INSTRUCTIONS_CHARS) or ""
        safe_ai_instructions = _truncate(ai_instructions, MAX_INSTRUCTIONS_CHARS)

        outcome = self.run_with_timeout(
            provider.name,
            lambda: provider.validate_audio(
                audio=audio,
                mime_type=mime_type,
                instructions=safe_instructions,
                ai_instructions=safe_ai_instructions,
            ),
        )
        return resolve_outcome(outcome)


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
