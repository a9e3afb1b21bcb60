# versioned_values package

from .comparers import CaseFoldComparer, FloatComparer, ValueComparer
from .errors import REQUIRED_VALUE_MISSING, RequiredValueMissingError, VersionValidationError
from .kinds import ValueKind, annotation_for, value_adapter
from .models import (
    BlobVersion,
    BooleanVersion,
    ByteVersion,
    DateTimeOffsetVersion,
    DateTimeVersion,
    DecimalVersion,
    DoubleVersion,
    GuidVersion,
    Int16Version,
    Int32Version,
    Int64Version,
    NullableBooleanVersion,
    NullableByteVersion,
    NullableDateTimeOffsetVersion,
    NullableDateTimeVersion,
    NullableDecimalVersion,
    NullableDoubleVersion,
    NullableGuidVersion,
    NullableInt16Version,
    NullableInt32Version,
    NullableInt64Version,
    NullableSingleVersion,
    SingleVersion,
    TextVersion,
    Version,
    version_type,
)
from .required import RequiredBlobVersion, RequiredTextVersion, RequiredVersion
from .protocols import AnyVersion, VersionStore
from .adaptors import memory_store_factory, sqlite_store_factory
from .factories import store_factory

__all__ = [
    "ValueKind",
    "annotation_for",
    "value_adapter",
    "Version",
    "version_type",
    "RequiredVersion",
    "RequiredTextVersion",
    "RequiredBlobVersion",
    "BooleanVersion",
    "ByteVersion",
    "Int16Version",
    "Int32Version",
    "Int64Version",
    "SingleVersion",
    "DoubleVersion",
    "DecimalVersion",
    "DateTimeVersion",
    "DateTimeOffsetVersion",
    "GuidVersion",
    "NullableBooleanVersion",
    "NullableByteVersion",
    "NullableInt16Version",
    "NullableInt32Version",
    "NullableInt64Version",
    "NullableSingleVersion",
    "NullableDoubleVersion",
    "NullableDecimalVersion",
    "NullableDateTimeVersion",
    "NullableDateTimeOffsetVersion",
    "NullableGuidVersion",
    "TextVersion",
    "BlobVersion",
    "ValueComparer",
    "FloatComparer",
    "CaseFoldComparer",
    "VersionValidationError",
    "RequiredValueMissingError",
    "REQUIRED_VALUE_MISSING",
    "AnyVersion",
    "VersionStore",
    "memory_store_factory",
    "sqlite_store_factory",
    "store_factory",
]
