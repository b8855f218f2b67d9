from __future__ import annotations

from typing import Callable, Dict, Optional

from .disabled import DisabledProvider

_FACTORIES: Dict[str, Callable[[], object]] = {
    "disabled": DisabledProvider,
}


def register_provider(name: str, factory: Callable[[], object]) -> None:
    _FACTORIES[name.strip().lower()] = factory


def get_provider(name: Optional[str] = None):
    """
    Registry entry point. Unknown or empty names fall back to "disabled"
    so a misconfigured deployment fails open instead of failing requests.
    """
    key = (name or "disabled").strip().lower()
    factory = _FACTORIES.get(key, DisabledProvider)
    return factory()
