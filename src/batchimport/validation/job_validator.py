"""Structural checks run on a job definition before it is processed."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence

from pydantic import BaseModel

from batchimport.core.exceptions import DefinitionInvalidError
from batchimport.models.job import FieldMapping, FieldMatch, JobDefinition


class Violation(BaseModel):
    """One reason a job definition cannot be run."""

    code: str
    message: str
    field: str | None = None


JobCheck = Callable[[JobDefinition], Iterable[Violation]]


def check_key(job: JobDefinition) -> list[Violation]:
    if any(m.is_key and m.is_included for m in job.fields):
        return []
    return [Violation(
        code="missing_key",
        message="Missing key column.  Please select a column to be the key.",
    )]


def check_selection(job: JobDefinition) -> list[Violation]:
    if any(m.is_included and not m.is_key for m in job.fields):
        return []
    return [Violation(
        code="missing_selection",
        message="Missing column selection.  Please select a column to be included.",
    )]


def check_mapping(mapping: FieldMapping) -> list[Violation]:
    violations: list[Violation] = []

    if mapping.is_included and not mapping.has_source:
        violations.append(Violation(
            code="missing_source",
            field=mapping.name,
            message=f"Missing source column mapping.  Please select a source column for '{mapping.label}'.",
        ))
    elif mapping.required and not mapping.has_source and mapping.default is None:
        violations.append(Violation(
            code="missing_required",
            field=mapping.name,
            message=f"Missing required field mapping.  Please select a source field for '{mapping.label}'.",
        ))

    for match in mapping.match_definitions:
        violations.extend(check_match(mapping, match))
    return violations


def check_match(mapping: FieldMapping, match: FieldMatch) -> list[Violation]:
    if not match.use_regex or not match.text:
        return []
    try:
        re.compile(match.text)
    except re.error as exc:
        return [Violation(
            code="invalid_match",
            field=mapping.name,
            message=f"Invalid match expression {match.text!r} for '{mapping.label}': {exc}",
        )]
    return []


def validate_job(job: JobDefinition, extra_checks: Sequence[JobCheck] = ()) -> list[Violation]:
    """Return every structural violation found in ``job``, in check order."""
    violations = check_key(job) + check_selection(job)
    for mapping in job.fields:
        violations.extend(check_mapping(mapping))
    for check in extra_checks:
        violations.extend(check(job))
    return violations


def ensure_valid_job(job: JobDefinition, extra_checks: Sequence[JobCheck] = ()) -> None:
    """Raise DefinitionInvalidError if ``job`` has any violation."""
    violations = validate_job(job, extra_checks)
    if violations:
        raise DefinitionInvalidError(violations)
