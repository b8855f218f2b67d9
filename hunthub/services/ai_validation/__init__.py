from hunthub.services.ai_validation.service import (
    FALLBACK_FEEDBACK,
    AIOutcome,
    AIValidationResult,
    AIValidationService,
    resolve_outcome,
)

__all__ = ["FALLBACK_FEEDBACK", "AIOutcome", "AIValidationResult", "AIValidationService", "resolve_outcome"]
