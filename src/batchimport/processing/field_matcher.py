"""Resolves configured field mappings against the columns of an uploaded file."""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

from batchimport.components.registry import ComponentRegistry
from batchimport.core.exceptions import PreconditionError
from batchimport.core.logging import get_logger
from batchimport.models.job import (
    UNSELECTED_INDEX,
    FieldIndex,
    FieldMapping,
    FieldMatch,
    JobDefinition,
    unselected_field,
)

logger = get_logger(__name__)


def _candidates(source_fields: Sequence[FieldIndex]) -> list[FieldIndex]:
    return [f for f in source_fields if f.index != UNSELECTED_INDEX]


def _match_rule(candidates: list[FieldIndex], rule: FieldMatch) -> FieldIndex | None:
    if rule.use_regex:
        try:
            pattern = re.compile(rule.text, re.IGNORECASE)
        except re.error as exc:
            logger.warning("invalid_match_expression", text=rule.text, error=str(exc))
            return None
        return next((f for f in candidates if pattern.search(f.name)), None)

    wanted = rule.text.casefold()
    return next((f for f in candidates if f.name.casefold() == wanted), None)


def find_field(source_fields: Sequence[FieldIndex], mapping: FieldMapping) -> FieldIndex | None:
    """Find the source column for ``mapping``.

    Match definitions are tried in declaration order and the first one that
    matches any column wins; its translator source is copied onto the
    mapping. Without a matching rule the mapping name is compared to the
    column names, ignoring case.
    """
    candidates = _candidates(source_fields)

    for rule in mapping.match_definitions:
        if not rule.text:
            continue
        match = _match_rule(candidates, rule)
        if match is None:
            continue
        mapping.translator_source = rule.translator_source
        return match

    name = mapping.name.casefold()
    return next((f for f in candidates if f.name.casefold() == name), None)


def extract_fields(
    job: JobDefinition,
    file_name: str,
    working_file: str | Path,
    *,
    registry: ComponentRegistry,
) -> JobDefinition:
    """Read the working file's header and resolve every mapping's source column."""
    if job is None:
        raise PreconditionError("A job definition is required.")
    if not working_file:
        raise PreconditionError("A working file is required.")
    if not Path(working_file).is_file():
        raise PreconditionError(f"The job working file '{working_file}' could not be found.")

    job.file_name = file_name
    job.working_file = str(working_file)

    reader = registry.resolve_reader(job.reader_type)
    if reader is None:
        raise PreconditionError(f"No reader registered for type {job.reader_type!r}.")

    job.source_fields = [unselected_field(), *reader.read_header(job.working_file)]

    key_candidates = sum(1 for m in job.fields if m.can_be_key)
    matched = 0
    for mapping in job.fields:
        match = find_field(job.source_fields, mapping)
        if match is None:
            continue

        mapping.index = match.index
        mapping.is_included = True
        matched += 1

        if mapping.can_be_key and key_candidates == 1:
            mapping.is_key = True

    logger.info(
        "fields_extracted",
        job_id=job.id,
        working_file=job.working_file,
        source_fields=len(job.source_fields) - 1,
        mappings=len(job.fields),
        matched=matched,
    )
    return job
