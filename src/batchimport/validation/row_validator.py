"""Default row validator: null checks and duplicate key detection."""

from __future__ import annotations

from collections.abc import Hashable, Iterable
from typing import Any

from batchimport.core.types import Record
from batchimport.models.job import JobDefinition
from batchimport.models.results import RowVerdict

HASH_SEED = 17
HASH_MULTIPLIER = 486187739
_HASH_MASK = (1 << 64) - 1


def _key_part(value: Any) -> Hashable:
    try:
        hash(value)
    except TypeError:
        return repr(value)
    return value


def key_of(values: Iterable[Any]) -> tuple[Hashable, ...]:
    """Order-sensitive key tuple; unhashable values are keyed by ``repr``."""
    return tuple(_key_part(v) for v in values)


def combine_hash(values: Iterable[Any], seed: int = HASH_SEED) -> int:
    """Fold values into a single order-sensitive hash (multiply then xor)."""
    h = seed
    for value in values:
        part = 0 if value is None else hash(_key_part(value))
        h = ((h * HASH_MULTIPLIER) ^ part) & _HASH_MASK
    return h


def _delimited(values: Iterable[Any]) -> str:
    return ", ".join("" if v is None else str(v) for v in values)


class DefaultRowValidator:
    """IRowValidator run for every row unless the job names another validator.

    Rows are checked in isolation: the first active mapping that may not be
    null but is null makes the row invalid, and a row whose key values were
    already seen since the last ``reset()`` is a duplicate. Keys are bucketed
    by ``combine_hash`` and compared by value within a bucket.
    """

    def __init__(self) -> None:
        self._seen: dict[int, set[tuple[Hashable, ...]]] = {}

    def reset(self) -> None:
        self._seen.clear()

    def validate_row(self, job: JobDefinition, record: Record) -> RowVerdict:
        verdict = self.check_null(job, record)
        if not verdict.is_ok:
            return verdict
        return self.check_duplicate(job, record)

    def check_null(self, job: JobDefinition, record: Record) -> RowVerdict:
        for mapping in job.active_fields():
            if mapping.can_be_null:
                continue
            if record.get(mapping.name) is None:
                return RowVerdict.invalid(
                    f"Field '{mapping.name}' can not be null. {_delimited(record.values())}"
                )
        return RowVerdict.ok()

    def check_duplicate(self, job: JobDefinition, record: Record) -> RowVerdict:
        key_fields = [m.name for m in job.key_fields()]
        if not key_fields:
            return RowVerdict.ok()

        key_values = [record.get(name) for name in key_fields]
        key = key_of(key_values)
        bucket = self._seen.setdefault(combine_hash(key), set())
        if key not in bucket:
            bucket.add(key)
            return RowVerdict.ok()

        return RowVerdict.duplicate(
            f"Duplicate key found.  Field: {_delimited(key_fields)}, Value: {_delimited(key_values)}"
        )

    @property
    def seen_count(self) -> int:
        return sum(len(bucket) for bucket in self._seen.values())
