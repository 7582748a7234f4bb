"""batchimport exception hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from batchimport.models.results import BatchResult
    from batchimport.validation.job_validator import Violation


class BatchImportError(Exception):
    """Base exception for all batchimport errors."""


class PreconditionError(BatchImportError, ValueError):
    """A required argument, file, or component is missing."""


class DefinitionInvalidError(BatchImportError):
    """The job definition is structurally incomplete and cannot be run."""

    def __init__(self, violations: list[Violation]) -> None:
        self.violations = list(violations)
        message = self.violations[0].message if self.violations else "Invalid job definition."
        super().__init__(message)


class RowError(BatchImportError):
    """A single source row could not be turned into a clean record.

    When raised to abort a run, ``result`` holds the partial BatchResult
    accumulated up to and including the failing row.
    """

    def __init__(self, row_number: int, message: str) -> None:
        self.row_number = row_number
        self.result: BatchResult | None = None
        super().__init__(f"Row {row_number}: {message}")


class DuplicateRowError(RowError):
    """The row's key values were already seen in this run."""


class RowValidationError(RowError):
    """The row failed validation, translation, or type coercion."""


class TranslationError(BatchImportError):
    """A translator could not map a value for the requested source."""

    def __init__(self, translator: str, source: str, value: object) -> None:
        self.translator = translator
        self.source = source
        self.value = value
        super().__init__(f"{translator} could not translate {value!r} for source {source!r}")
