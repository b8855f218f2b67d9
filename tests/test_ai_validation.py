from hunthub.services.ai_validation import AIOutcome, AIValidationService, resolve_outcome
from hunthub.services.ai_validation.providers import (
    ProviderUnavailable,
    ProviderVerdict,
    get_provider,
    register_provider,
    registry,
)
from hunthub.services.ai_validation.providers.disabled import DisabledProvider
from tests.factories import FakeProvider


def test_provider_verdict_is_passed_through(settings, provider_factory):
    provider = provider_factory(verdict=ProviderVerdict(is_valid=False, feedback="Mention the river", confidence=0.8))
    service = AIValidationService(text_provider=provider, audio_provider=provider, settings=settings)

    result = service.validate_task_response("a poem about trees", "Write a poem", "Must mention the river")

    assert result.is_correct is False
    assert result.feedback == "Mention the river"
    assert result.fallback_used is False
    assert result.as_metadata()["aiModel"] == "fake-model"


def test_provider_error_fails_open(settings, provider_factory):
    provider = provider_factory(error=RuntimeError("quota exceeded"))
    service = AIValidationService(text_provider=provider, audio_provider=provider, settings=settings)

    result = service.validate_task_response("anything", "Write a poem")

    assert result.is_correct is True
    assert result.feedback == "Response received!"
    assert result.fallback_used is True
    assert result.as_metadata()["fallbackUsed"] is True


def test_timeout_fails_open(settings, provider_factory):
    provider = provider_factory(delay=1.0)
    service = AIValidationService(text_provider=provider, audio_provider=provider, settings=settings)

    result = service.validate_task_response("anything", "Write a poem")

    assert result.is_correct is True
    assert result.fallback_used is True
    assert result.error == "AIValidationTimeout"
    assert result.processing_time_ms < 1000


def test_disabled_provider_is_default_and_fails_open(settings):
    assert isinstance(get_provider(None), DisabledProvider)
    assert isinstance(get_provider("no-such-backend"), DisabledProvider)

    service = AIValidationService(settings=settings)
    result = service.validate_audio_response(b"...", "audio/webm", "Sing")

    assert result.is_correct is True
    assert result.fallback_used is True
    assert result.ai_model == "disabled"


def test_resolve_outcome_policy():
    failed = resolve_outcome(AIOutcome(model="m", error=ProviderUnavailable("down"), processing_time_ms=5))
    assert failed.is_correct and failed.fallback_used
    assert failed.error == "ProviderUnavailable"

    ok = resolve_outcome(AIOutcome(model="m", verdict=ProviderVerdict(is_valid=True, feedback="Great")))
    assert ok.is_correct and not ok.fallback_used
    assert ok.feedback == "Great"


def test_long_inputs_are_truncated(settings, provider_factory):
    provider = provider_factory()
    service = AIValidationService(text_provider=provider, audio_provider=provider, settings=settings)

    service.validate_task_response("x" * 2000, "y" * 5000)

    assert len(provider.calls[0]["user_response"]) == 500
    assert len(provider.calls[0]["instructions"]) == 2000


def test_registered_provider_is_selected_by_setting(settings, monkeypatch):
    monkeypatch.setattr(registry, "_FACTORIES", dict(registry._FACTORIES))
    register_provider(" Scripted ", FakeProvider)

    service = AIValidationService(settings=settings.model_copy(update={"ai_provider": "scripted"}))
    result = service.validate_task_response("the river bends here", "Describe the view", "Mention the river")

    assert isinstance(service.text_provider, FakeProvider)
    assert result.is_correct
    assert result.as_metadata()["aiModel"] == "fake-model"
