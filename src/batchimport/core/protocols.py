"""Protocol interfaces for the pluggable batchimport components.

Readers, translators, validators and the merge engine are supplied by the
embedding application. They only have to match these Protocols structurally;
no inheritance is required.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from batchimport.core.types import Record, SourceRow
from batchimport.models.job import FieldIndex, JobDefinition
from batchimport.models.results import MergeDefinition, RowVerdict


# ---------------------------------------------------------------------------
# Reader
# ---------------------------------------------------------------------------

@runtime_checkable
class IBatchReader(Protocol):
    """Parses a working file into a header list and data rows."""

    def read_header(self, path: str) -> list[FieldIndex]: ...

    def read_data(self, path: str) -> Sequence[SourceRow]: ...


# ---------------------------------------------------------------------------
# Translator
# ---------------------------------------------------------------------------

@runtime_checkable
class IBatchTranslator(Protocol):
    """Transforms a raw cell value, optionally per source key."""

    @property
    def sources(self) -> list[str]: ...

    def translate(self, source: str | None, original: Any) -> Any: ...


# ---------------------------------------------------------------------------
# Row Validator
# ---------------------------------------------------------------------------

@runtime_checkable
class IRowValidator(Protocol):
    """Validates target records. Holds per-run state cleared by reset()."""

    def reset(self) -> None: ...

    def validate_row(self, job: JobDefinition, record: Record) -> RowVerdict: ...


# ---------------------------------------------------------------------------
# Merge Engine
# ---------------------------------------------------------------------------

@runtime_checkable
class IDataMerge(Protocol):
    """Reconciles cleaned records against the destination store."""

    def merge(self, definition: MergeDefinition, records: list[Record]) -> list[dict[str, Any]]: ...
