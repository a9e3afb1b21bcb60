"""
This module defines the versioned value record using Pydantic.

`Version` is written once, generically over its payload type, and bound to each
kind of the catalog by a thin named subclass. Identity, equality and hashing
live only on the generic base; a subclass may at most choose another
`value_comparer`.

Instances are frozen. They are materialised by a `VersionStore`, which owns the
assignment of `id`, `subject_id` and `added`; application code appends new
versions through a store and never edits an existing one.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar, Dict, Generic, Optional, TypeVar
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, ConfigDict, NaiveDatetime

from .comparers import FloatComparer, ValueComparer
from .kinds import Byte, Int16, Int32, Int64, Single, ValueKind

V = TypeVar("V")

_VERSION_TYPES: Dict[ValueKind, type] = {}


def register_version_type(kind: ValueKind, version_cls: type):
    if kind in _VERSION_TYPES:
        raise ValueError(f"A version type is already registered for kind '{kind.value}'")
    _VERSION_TYPES[kind] = version_cls


def version_type(kind: ValueKind) -> type:
    """Returns the concrete version class for `kind`."""
    return _VERSION_TYPES[ValueKind(kind)]


class Version(BaseModel, Generic[V]):
    model_config = ConfigDict(frozen=True)

    kind: ClassVar[Optional[ValueKind]] = None
    value_comparer: ClassVar[ValueComparer] = ValueComparer()

    id: Int64
    subject_id: UUID
    added: datetime
    value: V

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        # Only the named per-kind classes declare `kind` themselves.
        if cls.__dict__.get("kind") is not None:
            register_version_type(cls.kind, cls)

    def __eq__(self, other: object) -> bool:
        if other is None or type(other) is not type(self):
            return False
        if other is self:
            return True
        return (
            self.id == other.id
            and self.subject_id == other.subject_id
            and self.added == other.added
            and self.value_comparer.equals(self.value, other.value)
        )

    def __hash__(self) -> int:
        parts = (self.id, self.subject_id, self.added)
        if self.value is not None:
            parts += (self.value_comparer.hash(self.value),)
        return hash(parts)

    def __str__(self) -> str:
        return "" if self.value is None else str(self.value)


# Primitives
class BooleanVersion(Version[bool]):
    kind: ClassVar[ValueKind] = ValueKind.BOOLEAN

class ByteVersion(Version[Byte]):
    kind: ClassVar[ValueKind] = ValueKind.BYTE

class Int16Version(Version[Int16]):
    kind: ClassVar[ValueKind] = ValueKind.INT16

class Int32Version(Version[Int32]):
    kind: ClassVar[ValueKind] = ValueKind.INT32

class Int64Version(Version[Int64]):
    kind: ClassVar[ValueKind] = ValueKind.INT64

class SingleVersion(Version[Single]):
    kind: ClassVar[ValueKind] = ValueKind.SINGLE
    value_comparer: ClassVar[ValueComparer] = FloatComparer()

class DoubleVersion(Version[float]):
    kind: ClassVar[ValueKind] = ValueKind.DOUBLE
    value_comparer: ClassVar[ValueComparer] = FloatComparer()

class DecimalVersion(Version[Decimal]):
    kind: ClassVar[ValueKind] = ValueKind.DECIMAL

class DateTimeVersion(Version[NaiveDatetime]):
    kind: ClassVar[ValueKind] = ValueKind.DATETIME

class DateTimeOffsetVersion(Version[AwareDatetime]):
    kind: ClassVar[ValueKind] = ValueKind.DATETIME_OFFSET

class GuidVersion(Version[UUID]):
    kind: ClassVar[ValueKind] = ValueKind.GUID


# Nullable primitives
class NullableBooleanVersion(Version[Optional[bool]]):
    kind: ClassVar[ValueKind] = ValueKind.NULLABLE_BOOLEAN

class NullableByteVersion(Version[Optional[Byte]]):
    kind: ClassVar[ValueKind] = ValueKind.NULLABLE_BYTE

class NullableInt16Version(Version[Optional[Int16]]):
    kind: ClassVar[ValueKind] = ValueKind.NULLABLE_INT16

class NullableInt32Version(Version[Optional[Int32]]):
    kind: ClassVar[ValueKind] = ValueKind.NULLABLE_INT32

class NullableInt64Version(Version[Optional[Int64]]):
    kind: ClassVar[ValueKind] = ValueKind.NULLABLE_INT64

class NullableSingleVersion(Version[Optional[Single]]):
    kind: ClassVar[ValueKind] = ValueKind.NULLABLE_SINGLE
    value_comparer: ClassVar[ValueComparer] = FloatComparer()

class NullableDoubleVersion(Version[Optional[float]]):
    kind: ClassVar[ValueKind] = ValueKind.NULLABLE_DOUBLE
    value_comparer: ClassVar[ValueComparer] = FloatComparer()

class NullableDecimalVersion(Version[Optional[Decimal]]):
    kind: ClassVar[ValueKind] = ValueKind.NULLABLE_DECIMAL

class NullableDateTimeVersion(Version[Optional[NaiveDatetime]]):
    kind: ClassVar[ValueKind] = ValueKind.NULLABLE_DATETIME

class NullableDateTimeOffsetVersion(Version[Optional[AwareDatetime]]):
    kind: ClassVar[ValueKind] = ValueKind.NULLABLE_DATETIME_OFFSET

class NullableGuidVersion(Version[Optional[UUID]]):
    kind: ClassVar[ValueKind] = ValueKind.NULLABLE_GUID


# Reference-like kinds are already nullable; see `required` for their required forms.
class TextVersion(Version[Optional[str]]):
    kind: ClassVar[ValueKind] = ValueKind.TEXT

class BlobVersion(Version[Optional[bytes]]):
    kind: ClassVar[ValueKind] = ValueKind.BLOB
