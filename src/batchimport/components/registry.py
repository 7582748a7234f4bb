"""Named registry of translator, validator and reader factories."""

from __future__ import annotations

import threading
from typing import Any

from batchimport.core.exceptions import PreconditionError
from batchimport.core.logging import get_logger
from batchimport.core.protocols import IBatchReader, IBatchTranslator, IRowValidator
from batchimport.core.types import Factory

logger = get_logger(__name__)

DEFAULT_VALIDATOR = "default"


def _is_blank(name: str | None) -> bool:
    return name is None or not name.strip()


class ComponentRegistry:
    """Maps logical names to plugin factories and caches resolved instances.

    Translator and validator instances are cached per name until ``reset()``.
    Readers are looked up case-insensitively and built fresh on every call.
    ``fork()`` returns a registry sharing the factories but with its own
    caches, which keeps per-run validator state out of concurrent runs.
    """

    def __init__(self, *, register_default_validator: bool = True) -> None:
        self._lock = threading.RLock()
        self._translators: dict[str, Factory] = {}
        self._validators: dict[str, Factory] = {}
        self._readers: dict[str, Factory] = {}  # keys are casefolded
        self._translator_cache: dict[str, IBatchTranslator | None] = {}
        self._validator_cache: dict[str, IRowValidator | None] = {}

        if register_default_validator:
            from batchimport.validation.row_validator import DefaultRowValidator

            self.register_validator(DEFAULT_VALIDATOR, DefaultRowValidator)

    # -- registration -------------------------------------------------------

    def register_translator(self, name: str, factory: Factory) -> None:
        self._register(self._translators, "translator", name, factory)

    def register_validator(self, name: str, factory: Factory) -> None:
        self._register(self._validators, "validator", name, factory)

    def register_reader(self, name: str, factory: Factory) -> None:
        self._register(self._readers, "reader", name.casefold() if name else name, factory)

    def _register(self, factories: dict[str, Factory], kind: str, name: str, factory: Factory) -> None:
        if _is_blank(name):
            raise PreconditionError(f"A {kind} name is required.")
        if not callable(factory):
            raise PreconditionError(f"The {kind} factory for {name!r} must be callable.")
        with self._lock:
            replaced = name in factories
            factories[name] = factory
        logger.debug("component_registered", kind=kind, name=name, replaced=replaced)

    # -- resolution ---------------------------------------------------------

    def resolve_translator(self, name: str | None) -> IBatchTranslator | None:
        """Return the cached translator for ``name``, or None if unknown."""
        return self._resolve_cached(self._translators, self._translator_cache, name)

    def resolve_validator(self, name: str | None) -> IRowValidator | None:
        """Return the cached row validator for ``name``, or None if unknown."""
        return self._resolve_cached(self._validators, self._validator_cache, name)

    def resolve_reader(self, name: str | None) -> IBatchReader | None:
        """Build a new reader for ``name`` (case-insensitive), or None if unknown."""
        if _is_blank(name):
            return None
        with self._lock:
            factory = self._readers.get(name.casefold())
        return factory() if factory is not None else None

    def _resolve_cached(
        self,
        factories: dict[str, Factory],
        cache: dict[str, Any],
        name: str | None,
    ) -> Any:
        if _is_blank(name):
            return None
        with self._lock:
            if name in cache:
                return cache[name]
            factory = factories.get(name)
            instance = factory() if factory is not None else None
            cache[name] = instance
            return instance

    # -- lifecycle ----------------------------------------------------------

    def reset(self) -> None:
        """Drop cached translator and validator instances."""
        with self._lock:
            self._translator_cache.clear()
            self._validator_cache.clear()

    def fork(self) -> ComponentRegistry:
        """Return a view sharing this registry's factories with empty caches."""
        child = ComponentRegistry.__new__(ComponentRegistry)
        child._lock = self._lock
        child._translators = self._translators
        child._validators = self._validators
        child._readers = self._readers
        child._translator_cache = {}
        child._validator_cache = {}
        return child

    # -- introspection ------------------------------------------------------

    def translator_names(self) -> list[str]:
        with self._lock:
            return sorted(self._translators)

    def validator_names(self) -> list[str]:
        with self._lock:
            return sorted(self._validators)

    def reader_names(self) -> list[str]:
        with self._lock:
            return sorted(self._readers)
