"""Shared test doubles — the memory reader plus stub translators and merge engine."""

from __future__ import annotations

from typing import Any

from batchimport.components.memory_reader import MemoryReader
from batchimport.components.translators import TranslatorBase
from batchimport.models.results import MergeDefinition, RowVerdict


class UpperTranslator(TranslatorBase):
    """Upper-cases values for source "upper"; counts loads and calls."""

    def __init__(self) -> None:
        super().__init__()
        self.load_calls = 0
        self.core_calls = 0

    @property
    def sources(self) -> list[str]:
        return ["upper"]

    def load_data(self) -> None:
        self.load_calls += 1

    def translate_core(self, source: str, original: Any) -> Any:
        self.core_calls += 1
        return str(original).upper()


class RejectingValidator:
    """IRowValidator that rejects rows whose ``field`` equals ``bad_value``."""

    def __init__(self, field: str = "name", bad_value: Any = "bad") -> None:
        self.field = field
        self.bad_value = bad_value
        self.resets = 0

    def reset(self) -> None:
        self.resets += 1

    def validate_row(self, job, record) -> RowVerdict:
        if record.get(self.field) == self.bad_value:
            return RowVerdict.invalid(f"{self.field} is {self.bad_value!r}")
        return RowVerdict.ok()


class RecordingMerge:
    """IDataMerge that records what it was given."""

    def __init__(self) -> None:
        self.calls: list[tuple[MergeDefinition, list[dict[str, Any]]]] = []

    def merge(self, definition: MergeDefinition, records: list[dict[str, Any]]) -> list[dict[str, Any]]:
        self.calls.append((definition, records))
        return [{"action": "INSERT", **r} for r in records]


__all__ = ["MemoryReader", "RecordingMerge", "RejectingValidator", "UpperTranslator"]
