"""Row pipeline: turns the working file's rows into cleaned, typed records."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from batchimport.components.registry import ComponentRegistry
from batchimport.core.exceptions import (
    DuplicateRowError,
    PreconditionError,
    RowError,
    RowValidationError,
)
from batchimport.core.logging import LogContext, get_logger
from batchimport.core.protocols import IBatchTranslator, IRowValidator
from batchimport.core.types import Record, SourceRow
from batchimport.models.job import BatchError, FieldDefault, FieldMapping, JobDefinition
from batchimport.models.results import BatchResult, RowFailure, RowVerdict, VerdictKind
from batchimport.processing.coercion import PYTHON_TYPES, coerce_value, is_blank
from batchimport.processing.merge import create_merge_definition

logger = get_logger(__name__)


def build_schema(mappings: Sequence[FieldMapping]) -> dict[str, type]:
    """Column name to Python type for the records produced from ``mappings``."""
    return {m.name: PYTHON_TYPES[m.data_type] for m in mappings}


def is_blank_row(row: SourceRow) -> bool:
    """A row is blank when every cell, mapped or not, is null or whitespace."""
    return all(is_blank(cell) for cell in row)


def default_value(job: JobDefinition, mapping: FieldMapping) -> Any:
    if mapping.default == FieldDefault.CURRENT_DATETIME:
        return datetime.now(UTC)
    if mapping.default == FieldDefault.USER_NAME:
        return job.user_name
    if mapping.default == FieldDefault.STATIC_VALUE:
        return mapping.default_value
    return None


class RowPipeline:
    """Streams source rows through defaults, translators and validation.

    A run works on a ``fork()`` of the registry, so translator and validator
    instances (and the validator's duplicate tracking) belong to that run
    only. The job definition is read, never modified; counters come back in
    the ``BatchResult``.
    """

    def __init__(self, registry: ComponentRegistry) -> None:
        self._registry = registry

    def process(self, job: JobDefinition) -> BatchResult:
        if job is None:
            raise PreconditionError("A job definition is required.")

        with LogContext(job_id=job.id):
            logger.info("batch_started", working_file=job.working_file, target_table=job.target_table)

            components = self._registry.fork()
            mappings = job.active_fields()
            schema = build_schema(mappings)
            logger.debug("batch_schema", columns=list(schema))

            rows = self._read_rows(job, components)
            translators = self._resolve_translators(mappings, components)

            validator = components.resolve_validator(job.validator_type)
            if validator is not None:
                validator.reset()

            result = BatchResult(job_id=job.id, merge=create_merge_definition(job))
            for row_number, row in enumerate(rows, start=1):
                result.row_count += 1
                self._copy_row(job, row_number, row, mappings, translators, validator, result)

            logger.info(
                "batch_processed",
                rows=result.row_count,
                records=len(result.records),
                blank=result.blank_count,
                errors=result.error_count,
                duplicates=result.duplicate_count,
            )
            return result

    def _read_rows(self, job: JobDefinition, components: ComponentRegistry) -> Sequence[SourceRow]:
        if not job.working_file:
            raise PreconditionError("The job has no working file.")
        if not Path(job.working_file).is_file():
            raise PreconditionError(f"The job working file '{job.working_file}' could not be found.")

        reader = components.resolve_reader(job.reader_type)
        if reader is None:
            raise PreconditionError(f"No reader registered for type {job.reader_type!r}.")
        return reader.read_data(job.working_file)

    def _resolve_translators(
        self, mappings: Sequence[FieldMapping], components: ComponentRegistry
    ) -> dict[str, IBatchTranslator]:
        translators: dict[str, IBatchTranslator] = {}
        for mapping in mappings:
            if not mapping.translator_type:
                continue
            translator = components.resolve_translator(mapping.translator_type)
            if translator is None:
                logger.warning("translator_not_found", field=mapping.name, translator=mapping.translator_type)
                continue
            translators[mapping.name] = translator
        return translators

    def build_record(
        self,
        job: JobDefinition,
        row: SourceRow,
        mappings: Sequence[FieldMapping],
        translators: dict[str, IBatchTranslator],
    ) -> Record:
        record: Record = {}
        for mapping in mappings:
            if mapping.has_source:
                value = row[mapping.index] if 0 <= mapping.index < len(row) else None
            else:
                value = default_value(job, mapping)

            translator = translators.get(mapping.name)
            if translator is not None:
                value = None if is_blank(value) else translator.translate(mapping.translator_source, value)

            try:
                record[mapping.name] = coerce_value(value, mapping.data_type)
            except (TypeError, ValueError) as exc:
                raise ValueError(f"Field '{mapping.name}' value {value!r}: {exc}") from exc
        return record

    def _copy_row(
        self,
        job: JobDefinition,
        row_number: int,
        row: SourceRow,
        mappings: Sequence[FieldMapping],
        translators: dict[str, IBatchTranslator],
        validator: IRowValidator | None,
        result: BatchResult,
    ) -> None:
        if is_blank_row(row):
            result.blank_count += 1
            return

        try:
            record = self.build_record(job, row, mappings, translators)
            verdict = validator.validate_row(job, record) if validator is not None else None
            if verdict is None:
                # validators that signal failure by raising return None on success
                verdict = RowVerdict.ok()
        except DuplicateRowError as exc:
            verdict, cause = RowVerdict.duplicate(str(exc)), exc
        except Exception as exc:
            verdict, cause = RowVerdict.invalid(str(exc)), exc
        else:
            cause = None

        if verdict.kind == VerdictKind.OK:
            result.records.append(record)
            return

        result.errors.append(RowFailure(row_number=row_number, kind=verdict.kind, message=verdict.message))

        if verdict.kind == VerdictKind.DUPLICATE:
            result.duplicate_count += 1
            logger.warning("row_duplicate", row=row_number, message=verdict.message)
            if job.duplicate_handling == BatchError.ABORT:
                self._abort(DuplicateRowError(row_number, verdict.message), cause, result)
            return

        result.error_count += 1
        logger.warning("row_failed", row=row_number, message=verdict.message)
        if job.error_handling == BatchError.ABORT or result.error_count > job.max_errors:
            self._abort(RowValidationError(row_number, verdict.message), cause, result)

    @staticmethod
    def _abort(error: RowError, cause: BaseException | None, result: BatchResult) -> None:
        logger.error(
            "batch_aborted",
            row=error.row_number,
            errors=result.error_count,
            duplicates=result.duplicate_count,
            reason=str(error),
        )
        error.result = result
        raise error from cause
