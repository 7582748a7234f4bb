"""Type aliases used across the batchimport package."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

Record = dict[str, Any]  # column name -> typed value
SourceRow = Sequence[Any]
Factory = Callable[[], Any]
