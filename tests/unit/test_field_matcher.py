"""Tests for source column resolution (extract_fields / find_field)."""

from __future__ import annotations

import pytest

from batchimport.core.exceptions import PreconditionError
from batchimport.models.job import (
    UNSELECTED_FIELD_NAME,
    FieldIndex,
    FieldMapping,
    FieldMatch,
    JobDefinition,
)
from batchimport.processing.field_matcher import extract_fields, find_field
from tests.unit.conftest import READER


def _fields(*names: str) -> list[FieldIndex]:
    return [FieldIndex(name=n, index=i) for i, n in enumerate(names)]


class TestFindField:
    def test_first_satisfied_rule_wins_text_first(self):
        mapping = FieldMapping(
            name="email",
            match_definitions=[
                FieldMatch(text="Email", translator_source="plain"),
                FieldMatch(text="^mail.*", use_regex=True, translator_source="regex"),
            ],
        )
        match = find_field(_fields("mailAddr", "Email"), mapping)
        assert match.name == "Email"
        assert mapping.translator_source == "plain"

    def test_first_satisfied_rule_wins_regex_first(self):
        mapping = FieldMapping(
            name="email",
            match_definitions=[
                FieldMatch(text="^mail.*", use_regex=True, translator_source="regex"),
                FieldMatch(text="Email", translator_source="plain"),
            ],
        )
        match = find_field(_fields("mailAddr", "Email"), mapping)
        assert match.name == "mailAddr"
        assert mapping.translator_source == "regex"

    def test_regex_ignores_case(self):
        mapping = FieldMapping(name="x", match_definitions=[FieldMatch(text="^FIRST", use_regex=True)])
        assert find_field(_fields("first name"), mapping).index == 0

    def test_blank_rule_text_skipped(self):
        mapping = FieldMapping(name="last", match_definitions=[FieldMatch(text="")])
        assert find_field(_fields("LAST"), mapping).name == "LAST"

    def test_falls_back_to_name_ignoring_case(self):
        mapping = FieldMapping(name="EmailAddress", match_definitions=[FieldMatch(text="nope")])
        assert find_field(_fields("id", "emailaddress"), mapping).index == 1
        assert mapping.translator_source is None

    def test_no_match_returns_none(self):
        assert find_field(_fields("a", "b"), FieldMapping(name="c")) is None

    def test_invalid_regex_is_skipped(self):
        mapping = FieldMapping(name="b", match_definitions=[FieldMatch(text="(", use_regex=True)])
        assert find_field(_fields("a", "b"), mapping).name == "b"

    def test_sentinel_never_matches(self):
        fields = [FieldIndex(name=UNSELECTED_FIELD_NAME, index=-1), *_fields("a")]
        mapping = FieldMapping(name="x", match_definitions=[FieldMatch(text=".*", use_regex=True)])
        assert find_field(fields, mapping).name == "a"


class TestExtractFields:
    def test_populates_source_fields_and_indexes(self, registry, reader, working_file):
        reader.add(str(working_file), ["Id", "First Name", "Email"])
        job = JobDefinition(
            reader_type=READER,
            fields=[
                FieldMapping(name="id", can_be_key=True),
                FieldMapping(name="first", match_definitions=[FieldMatch(text="first.*", use_regex=True)]),
                FieldMapping(name="phone"),
            ],
        )

        result = extract_fields(job, "users.csv", working_file, registry=registry)

        assert result is job
        assert job.file_name == "users.csv"
        assert job.working_file == str(working_file)
        assert job.source_fields[0].name == UNSELECTED_FIELD_NAME
        assert job.source_fields[0].index == -1
        assert [f.name for f in job.source_fields[1:]] == ["Id", "First Name", "Email"]
        assert job.field("id").index == 0 and job.field("id").is_included
        assert job.field("first").index == 1
        assert job.field("phone").index is None and not job.field("phone").is_included

    def test_single_key_candidate_marked_as_key(self, registry, reader, working_file):
        reader.add(str(working_file), ["Id", "Name"])
        job = JobDefinition(
            reader_type=READER,
            fields=[FieldMapping(name="id", can_be_key=True), FieldMapping(name="name")],
        )
        extract_fields(job, "f.csv", working_file, registry=registry)
        assert job.field("id").is_key

    def test_multiple_key_candidates_not_marked(self, registry, reader, working_file):
        reader.add(str(working_file), ["Id", "Name"])
        job = JobDefinition(
            reader_type=READER,
            fields=[FieldMapping(name="id", can_be_key=True), FieldMapping(name="name", can_be_key=True)],
        )
        extract_fields(job, "f.csv", working_file, registry=registry)
        assert not any(m.is_key for m in job.fields)

    def test_rerun_does_not_duplicate_sentinel(self, registry, reader, working_file):
        reader.add(str(working_file), ["Id"])
        job = JobDefinition(reader_type=READER, fields=[FieldMapping(name="id")])
        extract_fields(job, "f.csv", working_file, registry=registry)
        extract_fields(job, "f.csv", working_file, registry=registry)
        assert len(job.source_fields) == 2

    def test_missing_working_file_raises(self, registry, tmp_path):
        job = JobDefinition(reader_type=READER)
        with pytest.raises(PreconditionError):
            extract_fields(job, "f.csv", tmp_path / "absent.csv", registry=registry)

    def test_unknown_reader_raises(self, registry, working_file):
        job = JobDefinition(reader_type="excel")
        with pytest.raises(PreconditionError):
            extract_fields(job, "f.csv", working_file, registry=registry)
