"""Tests for DefaultRowValidator and duplicate key tracking."""

from __future__ import annotations

import pytest

from batchimport.models.job import FieldDefault, FieldMapping, JobDefinition
from batchimport.models.results import VerdictKind
from batchimport.validation.row_validator import HASH_SEED, DefaultRowValidator, combine_hash, key_of


@pytest.fixture
def job():
    return JobDefinition(fields=[
        FieldMapping(name="id", index=0, is_key=True),
        FieldMapping(name="code", index=1, is_key=True),
        FieldMapping(name="name", index=2, can_be_null=False),
        FieldMapping(name="unused", can_be_null=False),
    ])


@pytest.fixture
def validator():
    return DefaultRowValidator()


class TestKeyOf:
    def test_order_sensitive(self):
        assert key_of([1, "A"]) != key_of(["A", 1])

    def test_equal_values_give_equal_keys(self):
        assert key_of([1, "A", None]) == key_of([1, "A", None])

    def test_unhashable_values_keyed_by_repr(self):
        assert key_of([[1, 2]]) == ("[1, 2]",)


class TestCombineHash:
    def test_empty_is_seed(self):
        assert combine_hash([]) == HASH_SEED

    def test_order_sensitive(self):
        assert combine_hash([1, "A"]) != combine_hash(["A", 1])

    def test_unhashable_values_supported(self):
        assert combine_hash([[1, 2]]) == combine_hash([[1, 2]])

    def test_colliding_values_share_a_bucket(self):
        assert combine_hash([-1]) == combine_hash([-2])


class TestNullCheck:
    def test_null_in_non_nullable_field_is_invalid(self, validator, job):
        verdict = validator.validate_row(job, {"id": 1, "code": "A", "name": None})
        assert verdict.kind == VerdictKind.INVALID
        assert verdict.message.startswith("Field 'name' can not be null.")

    def test_inactive_mapping_not_checked(self, validator, job):
        assert validator.validate_row(job, {"id": 1, "code": "A", "name": "x"}).is_ok

    def test_defaulted_mapping_checked(self, validator):
        job = JobDefinition(fields=[FieldMapping(name="d", default=FieldDefault.USER_NAME, can_be_null=False)])
        assert validator.validate_row(job, {"d": None}).kind == VerdictKind.INVALID

    def test_invalid_row_not_remembered_as_seen(self, validator, job):
        validator.validate_row(job, {"id": 1, "code": "A", "name": None})
        assert validator.validate_row(job, {"id": 1, "code": "A", "name": "x"}).is_ok


class TestDuplicateCheck:
    def test_repeated_key_is_duplicate(self, validator, job):
        rows = [(1, "A"), (1, "A"), (2, "B")]
        verdicts = [validator.validate_row(job, {"id": i, "code": c, "name": "n"}) for i, c in rows]
        assert [v.kind for v in verdicts] == [VerdictKind.OK, VerdictKind.DUPLICATE, VerdictKind.OK]
        assert verdicts[1].message == "Duplicate key found.  Field: id, code, Value: 1, A"

    def test_reset_clears_seen_keys(self, validator, job):
        validator.validate_row(job, {"id": 1, "code": "A", "name": "n"})
        validator.reset()
        assert validator.seen_count == 0
        assert validator.validate_row(job, {"id": 1, "code": "A", "name": "n"}).is_ok

    def test_no_key_fields_never_duplicate(self, validator):
        job = JobDefinition(fields=[FieldMapping(name="name", index=0)])
        assert validator.validate_row(job, {"name": "x"}).is_ok
        assert validator.validate_row(job, {"name": "x"}).is_ok

    def test_keys_with_colliding_hashes_are_distinct(self, validator, job):
        # same combine_hash bucket, different keys
        first = validator.validate_row(job, {"id": -1, "code": "A", "name": "n"})
        second = validator.validate_row(job, {"id": -2, "code": "A", "name": "n"})
        assert first.is_ok
        assert second.is_ok
        assert validator.seen_count == 2
