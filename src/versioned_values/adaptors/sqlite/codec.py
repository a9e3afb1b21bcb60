"""
Conversions between catalog payloads and SQLite storage classes.

Payloads are stored in the natural SQLite class where one exists. Everything
read back goes through the kind's pydantic validation again, so decoding is a
matter of handing the raw column value to `model_validate`.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict
from uuid import UUID
import math

from ...kinds import ValueKind

_AFFINITY: Dict[ValueKind, str] = {
    ValueKind.BOOLEAN: "INTEGER",
    ValueKind.BYTE: "INTEGER",
    ValueKind.INT16: "INTEGER",
    ValueKind.INT32: "INTEGER",
    ValueKind.INT64: "INTEGER",
    ValueKind.SINGLE: "REAL",
    ValueKind.DOUBLE: "REAL",
    # TEXT affinity keeps the exact digits; NUMERIC would round through a REAL.
    ValueKind.DECIMAL: "TEXT",
    ValueKind.DATETIME: "TEXT",
    ValueKind.DATETIME_OFFSET: "TEXT",
    ValueKind.GUID: "TEXT",
    ValueKind.TEXT: "TEXT",
    ValueKind.BLOB: "BLOB",
}


def table_name(kind: ValueKind) -> str:
    return f"versions_{kind.value}"


def column_type(kind: ValueKind) -> str:
    affinity = _AFFINITY[kind.base]
    return affinity if kind.nullable else f"{affinity} NOT NULL"


def to_sql(value: Any) -> Any:
    # SQLite stores a NaN REAL as NULL.
    if isinstance(value, float) and math.isnan(value):
        return "NaN"
    if isinstance(value, (Decimal, UUID)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return value
