"""Row verdicts, run results, and the merge definition handed downstream."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class VerdictKind(StrEnum):
    OK = "OK"
    DUPLICATE = "DUPLICATE"
    INVALID = "INVALID"


class RowVerdict(BaseModel):
    """Outcome of validating a single target record."""

    kind: VerdictKind = VerdictKind.OK
    message: str = ""

    @classmethod
    def ok(cls) -> RowVerdict:
        return cls()

    @classmethod
    def duplicate(cls, message: str) -> RowVerdict:
        return cls(kind=VerdictKind.DUPLICATE, message=message)

    @classmethod
    def invalid(cls, message: str) -> RowVerdict:
        return cls(kind=VerdictKind.INVALID, message=message)

    @property
    def is_ok(self) -> bool:
        return self.kind == VerdictKind.OK


class RowFailure(BaseModel):
    """A source row that was dropped from the cleaned record set."""

    row_number: int
    kind: VerdictKind
    message: str


class MergeColumn(BaseModel):
    """Per-column settings the merge engine needs for one active mapping."""

    name: str
    native_type: str = ""
    data_type: str = "string"
    can_insert: bool = True
    can_update: bool = True
    is_key: bool = False


class MergeDefinition(BaseModel):
    """Target table and column rules for reconciling the cleaned records."""

    target_table: str
    include_insert: bool = False
    include_update: bool = False
    include_delete: bool = False
    columns: list[MergeColumn] = Field(default_factory=list)

    @property
    def key_columns(self) -> list[str]:
        return [c.name for c in self.columns if c.is_key]


class BatchResult(BaseModel):
    """Cleaned records and accounting for one run of a job definition."""

    job_id: str
    records: list[dict[str, Any]] = Field(default_factory=list)
    row_count: int = 0
    blank_count: int = 0
    error_count: int = 0
    duplicate_count: int = 0
    errors: list[RowFailure] = Field(default_factory=list)
    merge: MergeDefinition

    @property
    def skipped_count(self) -> int:
        """Rows dropped because of errors or duplicates (blank rows excluded)."""
        return self.error_count + self.duplicate_count
