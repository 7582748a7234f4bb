"""Translator base class and a dictionary-backed lookup translator."""

from __future__ import annotations

import math
import threading
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any

from batchimport.core.exceptions import TranslationError
from batchimport.core.logging import get_logger

logger = get_logger(__name__)

SOURCE_NONE = "none"


def is_missing(value: Any) -> bool:
    """True for None and float NaN (how readers surface empty cells)."""
    return value is None or (isinstance(value, float) and math.isnan(value))


class TranslatorBase(ABC):
    """Common translate() contract for IBatchTranslator implementations.

    Null input is passed through as None and a blank or ``"none"`` source is
    passed through unchanged, without loading reference data. Reference data is
    loaded once, on the first call that actually needs it.
    """

    def __init__(self) -> None:
        self._loaded = False
        self._load_lock = threading.Lock()

    @property
    @abstractmethod
    def sources(self) -> list[str]: ...

    def translate(self, source: str | None, original: Any) -> Any:
        if is_missing(original):
            return None
        if source is None or not source.strip() or source.strip().lower() == SOURCE_NONE:
            return original

        self.load()
        return self.translate_core(source, original)

    def load(self) -> None:
        if self._loaded:
            return
        with self._load_lock:
            if self._loaded:
                return
            logger.debug("translator_loading", translator=type(self).__name__)
            self.load_data()
            self._loaded = True

    @abstractmethod
    def translate_core(self, source: str, original: Any) -> Any: ...

    @abstractmethod
    def load_data(self) -> None: ...

    # -- conversion helpers for subclasses -----------------------------------

    @staticmethod
    def to_str(value: Any) -> str | None:
        if is_missing(value):
            return None
        if isinstance(value, str):
            return value.strip()
        return str(value)

    @staticmethod
    def to_int(value: Any) -> int:
        if is_missing(value):
            return 0
        if isinstance(value, str):
            text = value.strip()
            return int(text) if text else 0
        return int(value)

    @staticmethod
    def to_datetime(value: Any) -> datetime | None:
        if is_missing(value):
            return None
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day)
        if isinstance(value, str):
            text = value.strip()
            return datetime.fromisoformat(text) if text else None
        return None

    def __str__(self) -> str:
        return type(self).__name__


class LookupTranslator(TranslatorBase):
    """Translates values through one lookup table per source key.

    ``tables`` maps a source key to ``{raw value: translated value}``; keys of
    the inner tables are compared after ``str().strip().casefold()``. A
    ``loader`` callable may be given instead, to fetch the tables lazily.
    With ``strict=True`` a miss raises ``TranslationError``; otherwise the
    original value is returned.
    """

    def __init__(
        self,
        tables: dict[str, dict[Any, Any]] | None = None,
        *,
        loader: Any = None,
        strict: bool = False,
    ) -> None:
        super().__init__()
        self._raw_tables = tables or {}
        self._loader = loader
        self._strict = strict
        self._tables: dict[str, dict[str, Any]] = {}

    @property
    def sources(self) -> list[str]:
        names = self._tables if self._loaded else self._raw_tables
        return sorted(names)

    def load_data(self) -> None:
        tables = self._loader() if self._loader is not None else self._raw_tables
        self._tables = {
            source: {self._normalize(k): v for k, v in table.items()}
            for source, table in tables.items()
        }

    def translate_core(self, source: str, original: Any) -> Any:
        table = self._tables.get(source)
        if table is None:
            raise TranslationError(str(self), source, original)

        key = self._normalize(original)
        if key in table:
            return table[key]
        if self._strict:
            raise TranslationError(str(self), source, original)
        return original

    @staticmethod
    def _normalize(value: Any) -> str:
        return str(value).strip().casefold()
