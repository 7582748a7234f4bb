"""Pluggable components: the registry, translators and the in-memory reader."""

from __future__ import annotations

import threading

from batchimport.components.registry import DEFAULT_VALIDATOR, ComponentRegistry
from batchimport.core.config import BatchSettings

_default: ComponentRegistry | None = None
_default_lock = threading.Lock()


def create_registry(settings: BatchSettings | None = None) -> ComponentRegistry:
    """Create a new registry configured from application settings."""
    if settings is None:
        settings = BatchSettings()
    return ComponentRegistry(register_default_validator=settings.registry.register_default_validator)


def default_registry() -> ComponentRegistry:
    """Return the shared process-wide registry, creating it on first use.

    Callers opt into shared state explicitly; everything else in the package
    takes a registry argument.
    """
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = create_registry()
    return _default


__all__ = ["ComponentRegistry", "DEFAULT_VALIDATOR", "create_registry", "default_registry"]
