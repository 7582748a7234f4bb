"""In-memory IBatchReader for tests and for callers that parse files themselves."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from batchimport.models.job import FieldIndex


class MemoryReader:
    """Dict-backed IBatchReader keyed by working file path."""

    def __init__(self) -> None:
        self._headers: dict[str, list[str]] = {}
        self._rows: dict[str, list[list[Any]]] = {}

    def add(self, path: str, header: Sequence[str], rows: Sequence[Sequence[Any]] = ()) -> None:
        """Register the header and data rows returned for ``path``."""
        self._headers[str(path)] = list(header)
        self._rows[str(path)] = [list(r) for r in rows]

    def read_header(self, path: str) -> list[FieldIndex]:
        return [FieldIndex(name=name, index=i) for i, name in enumerate(self._headers[str(path)])]

    def read_data(self, path: str) -> list[list[Any]]:
        return self._rows[str(path)]
