"""
This module defines the closed catalog of value kinds a version can carry.

Each kind maps to a pydantic annotation that validates its payload. Nullable
kinds wrap the annotation of their base kind in `Optional`; text and blob are
already nullable and get a separate required form instead.
"""
from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, Dict, Optional
from uuid import UUID
import math
import struct

from pydantic import AfterValidator, AwareDatetime, Field, NaiveDatetime, TypeAdapter


def _to_single_precision(value: float) -> float:
    if not math.isfinite(value):
        return value
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        raise ValueError(f"{value!r} is outside the single precision range") from None


Byte = Annotated[int, Field(ge=0, le=255)]
Int16 = Annotated[int, Field(ge=-(2**15), le=2**15 - 1)]
Int32 = Annotated[int, Field(ge=-(2**31), le=2**31 - 1)]
Int64 = Annotated[int, Field(ge=-(2**63), le=2**63 - 1)]
Single = Annotated[float, AfterValidator(_to_single_precision)]


class ValueKind(str, Enum):
    BOOLEAN = "boolean"
    BYTE = "byte"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    SINGLE = "single"
    DOUBLE = "double"
    DECIMAL = "decimal"
    DATETIME = "datetime"
    DATETIME_OFFSET = "datetime_offset"
    GUID = "guid"

    NULLABLE_BOOLEAN = "nullable_boolean"
    NULLABLE_BYTE = "nullable_byte"
    NULLABLE_INT16 = "nullable_int16"
    NULLABLE_INT32 = "nullable_int32"
    NULLABLE_INT64 = "nullable_int64"
    NULLABLE_SINGLE = "nullable_single"
    NULLABLE_DOUBLE = "nullable_double"
    NULLABLE_DECIMAL = "nullable_decimal"
    NULLABLE_DATETIME = "nullable_datetime"
    NULLABLE_DATETIME_OFFSET = "nullable_datetime_offset"
    NULLABLE_GUID = "nullable_guid"

    TEXT = "text"
    REQUIRED_TEXT = "required_text"
    BLOB = "blob"
    REQUIRED_BLOB = "required_blob"

    @property
    def base(self) -> "ValueKind":
        """The plain kind underneath a nullable or required form."""
        return ValueKind(self.value.removeprefix("nullable_").removeprefix("required_"))

    @property
    def nullable(self) -> bool:
        """Whether an absent value (`None`) is representable for this kind."""
        return self.value.startswith("nullable_") or self in (ValueKind.TEXT, ValueKind.BLOB)

    @property
    def required(self) -> bool:
        return self.value.startswith("required_")


_BASE_ANNOTATIONS: Dict[ValueKind, Any] = {
    ValueKind.BOOLEAN: bool,
    ValueKind.BYTE: Byte,
    ValueKind.INT16: Int16,
    ValueKind.INT32: Int32,
    ValueKind.INT64: Int64,
    ValueKind.SINGLE: Single,
    ValueKind.DOUBLE: float,
    ValueKind.DECIMAL: Decimal,
    ValueKind.DATETIME: NaiveDatetime,
    ValueKind.DATETIME_OFFSET: AwareDatetime,
    ValueKind.GUID: UUID,
    ValueKind.TEXT: str,
    ValueKind.BLOB: bytes,
}


def annotation_for(kind: ValueKind) -> Any:
    """Returns the pydantic annotation that validates a payload of `kind`."""
    annotation = _BASE_ANNOTATIONS[kind.base]
    if kind.nullable:
        return Optional[annotation]
    return annotation


@lru_cache(maxsize=None)
def value_adapter(kind: ValueKind) -> TypeAdapter:
    return TypeAdapter(annotation_for(kind))


__all__ = [
    "ValueKind",
    "Byte",
    "Int16",
    "Int32",
    "Int64",
    "Single",
    "annotation_for",
    "value_adapter",
]
