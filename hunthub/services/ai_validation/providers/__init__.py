from .base import AudioValidationProvider, ProviderUnavailable, ProviderVerdict, TextValidationProvider
from .registry import get_provider, register_provider

__all__ = [
    "AudioValidationProvider",
    "ProviderUnavailable",
    "ProviderVerdict",
    "TextValidationProvider",
    "get_provider",
    "register_provider",
]
