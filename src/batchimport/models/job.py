"""Job definition models: the configuration for one batch import run."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class BatchError(StrEnum):
    """How a failing row affects the rest of the run."""

    SKIP = "SKIP"  # drop the row and continue
    ABORT = "ABORT"  # stop processing the batch


class FieldDefault(StrEnum):
    """Source of a synthesized value for a mapping with no source column."""

    CURRENT_DATETIME = "CURRENT_DATETIME"
    USER_NAME = "USER_NAME"
    STATIC_VALUE = "STATIC_VALUE"


class DataType(StrEnum):
    """Semantic type of a target column."""

    STRING = "string"
    INTEGER = "integer"
    DECIMAL = "decimal"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    OBJECT = "object"


class FieldIndex(BaseModel):
    """A column discovered in the uploaded file."""

    name: str
    index: Optional[int] = None

    def __str__(self) -> str:
        return f"Name: {self.name}, Index: {self.index}"


UNSELECTED_FIELD_NAME = "- Select -"
UNSELECTED_INDEX = -1


def unselected_field() -> FieldIndex:
    """The placeholder entry that always heads a job's source field list."""
    return FieldIndex(name=UNSELECTED_FIELD_NAME, index=UNSELECTED_INDEX)


class FieldMatch(BaseModel):
    """A rule used to match a source column name to a field mapping."""

    text: str = ""
    use_regex: bool = False
    translator_source: Optional[str] = None  # copied onto the mapping when matched


class FieldMapping(BaseModel):
    """Full configuration of one target column."""

    name: str
    display_name: str = ""
    native_type: str = ""
    data_type: DataType = DataType.STRING

    index: Optional[int] = None  # resolved source column position
    is_key: bool = False
    is_included: bool = False

    can_be_key: bool = False
    can_insert: bool = True
    can_update: bool = True
    can_map: bool = True
    can_be_null: bool = True
    required: bool = False

    default: Optional[FieldDefault] = None
    default_value: Any = None

    translator_type: Optional[str] = None
    translator_source: Optional[str] = None
    translator_sources: list[str] = Field(default_factory=list)

    match_definitions: list[FieldMatch] = Field(default_factory=list)

    @property
    def is_active(self) -> bool:
        """Whether the row pipeline produces a value for this column."""
        return self.index is not None or self.default is not None

    @property
    def has_source(self) -> bool:
        return self.index is not None and self.index != UNSELECTED_INDEX

    @property
    def label(self) -> str:
        return self.display_name or self.name

    def __str__(self) -> str:
        return f"Name: {self.name}, Index: {self.index}, DataType: {self.data_type}"


class JobDefinition(BaseModel):
    """Definition of one batch import run.

    The definition holds no run state: counters produced by a run are returned
    in a ``BatchResult``, so one definition may be processed repeatedly.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)

    # --- Context ---
    file_name: str = ""
    working_file: str = ""
    entity_type: str = ""  # audit tag for the destination entity
    user_name: str = ""
    description: str = ""

    # --- Components ---
    reader_type: str = ""
    validator_type: Optional[str] = "default"  # None disables row validation

    # --- Policy ---
    duplicate_handling: BatchError = BatchError.SKIP
    error_handling: BatchError = BatchError.SKIP
    max_errors: int = Field(default=10, ge=0)

    # --- Target ---
    target_table: str = ""
    can_insert: bool = False
    can_update: bool = False
    can_delete: bool = False

    # --- Schema ---
    source_fields: list[FieldIndex] = Field(default_factory=list)
    fields: list[FieldMapping] = Field(default_factory=list)

    def active_fields(self) -> list[FieldMapping]:
        return [f for f in self.fields if f.is_active]

    def key_fields(self) -> list[FieldMapping]:
        return [f for f in self.fields if f.is_active and f.is_key]

    def field(self, name: str) -> FieldMapping | None:
        """Look up a mapping by name, ignoring case."""
        wanted = name.casefold()
        return next((f for f in self.fields if f.name.casefold() == wanted), None)

    def __str__(self) -> str:
        return f"FileName: {self.file_name}, TargetTable: {self.target_table}, UserName: {self.user_name}"
