"""Conversion of raw cell values to a mapping's semantic data type."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from batchimport.components.translators import is_missing
from batchimport.models.job import DataType

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_FALSE = {"0", "false", "f", "no", "n", "off"}


def is_blank(value: Any) -> bool:
    """True for missing values and whitespace-only strings."""
    if is_missing(value):
        return True
    return isinstance(value, str) and not value.strip()


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"{value!r} is not a boolean value")


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{value!r} is not an integer value")
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    return int(value)


def _to_decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"{value!r} is not a decimal value") from exc


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip())


def _to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return datetime.fromisoformat(str(value).strip())


_CONVERTERS = {
    DataType.INTEGER: _to_int,
    DataType.DECIMAL: _to_decimal,
    DataType.FLOAT: lambda v: float(v.strip()) if isinstance(v, str) else float(v),
    DataType.BOOLEAN: _to_bool,
    DataType.DATE: _to_date,
    DataType.DATETIME: _to_datetime,
}


def coerce_value(value: Any, data_type: DataType) -> Any:
    """Convert ``value`` to ``data_type``; raises ValueError when it cannot.

    Missing values become None. Blank strings become None for every type but
    string. ``string`` and ``object`` columns keep their values unchanged,
    except that non-string values are rendered with ``str()`` for ``string``.
    """
    if is_missing(value):
        return None
    if data_type == DataType.OBJECT:
        return value
    if data_type == DataType.STRING:
        return value if isinstance(value, str) else str(value)
    if isinstance(value, str) and not value.strip():
        return None
    return _CONVERTERS[data_type](value)


PYTHON_TYPES: dict[DataType, type] = {
    DataType.STRING: str,
    DataType.INTEGER: int,
    DataType.DECIMAL: Decimal,
    DataType.FLOAT: float,
    DataType.BOOLEAN: bool,
    DataType.DATE: date,
    DataType.DATETIME: datetime,
    DataType.OBJECT: object,
}
