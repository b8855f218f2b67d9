from hunthub.services.validation.base import ValidationContext, ValidationResult
from hunthub.services.validation.dispatcher import VALIDATORS, expected_answer_types, validate_answer

__all__ = ["VALIDATORS", "ValidationContext", "ValidationResult", "expected_answer_types", "validate_answer"]
