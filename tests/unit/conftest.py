"""Unit test fixtures — registry wired to an in-memory reader."""

from __future__ import annotations

import pytest

from batchimport.components.registry import ComponentRegistry
from batchimport.models.job import FieldMapping, JobDefinition
from tests.fakes import MemoryReader

READER = "memory"


@pytest.fixture
def reader():
    return MemoryReader()


@pytest.fixture
def registry(reader):
    reg = ComponentRegistry()
    reg.register_reader(READER, lambda: reader)
    return reg


@pytest.fixture
def working_file(tmp_path):
    path = tmp_path / "upload.csv"
    path.write_text("staged upload\n")
    return path


@pytest.fixture
def make_job(working_file):
    """Build a job whose mappings are already resolved to source columns."""

    def _make(fields: list[FieldMapping], **kwargs) -> JobDefinition:
        values = {
            "reader_type": READER,
            "working_file": str(working_file),
            "target_table": "dbo.User",
            "user_name": "tester",
        }
        values.update(kwargs)
        return JobDefinition(fields=fields, **values)

    return _make
