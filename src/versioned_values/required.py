"""
Required forms of the reference-like kinds.

A `RequiredVersion` wraps a `TextVersion` or `BlobVersion` and guarantees that
its value is present. It delegates the identity fields to the wrapped record
and adds a single rule: wrapping a record whose value is `None` raises
`RequiredValueMissingError`. An empty string or blob counts as present.
"""
from datetime import datetime
from typing import Any, ClassVar, Generic, TypeVar
from uuid import UUID

from .errors import RequiredValueMissingError
from .kinds import ValueKind
from .models import BlobVersion, TextVersion, Version, register_version_type

V = TypeVar("V")


class RequiredVersion(Generic[V]):
    kind: ClassVar[ValueKind]
    version_type: ClassVar[type]

    __slots__ = ("_version",)

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        if "kind" in cls.__dict__:
            register_version_type(cls.kind, cls)

    def __init__(self, version: Version):
        if not isinstance(version, self.version_type):
            raise TypeError(
                f"{type(self).__name__} wraps {self.version_type.__name__}, got {type(version).__name__}"
            )
        if version.value is None:
            raise RequiredValueMissingError(self.kind)
        object.__setattr__(self, "_version", version)

    @classmethod
    def model_validate(cls, data: Any) -> "RequiredVersion[V]":
        """Validates `data` into the wrapped version type and wraps it."""
        if isinstance(data, dict) and data.get("value") is None:
            raise RequiredValueMissingError(cls.kind)
        return cls(cls.version_type.model_validate(data))

    @property
    def version(self) -> Version:
        return self._version

    @property
    def id(self) -> int:
        return self._version.id

    @property
    def subject_id(self) -> UUID:
        return self._version.subject_id

    @property
    def added(self) -> datetime:
        return self._version.added

    @property
    def value(self) -> V:
        return self._version.value

    def __setattr__(self, name: str, value: Any):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other: object) -> bool:
        if other is None or type(other) is not type(self):
            return False
        return other is self or self._version == other._version

    def __hash__(self) -> int:
        return hash(self._version)

    def __str__(self) -> str:
        return str(self._version)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._version!r})"


class RequiredTextVersion(RequiredVersion[str]):
    kind: ClassVar[ValueKind] = ValueKind.REQUIRED_TEXT
    version_type: ClassVar[type] = TextVersion


class RequiredBlobVersion(RequiredVersion[bytes]):
    kind: ClassVar[ValueKind] = ValueKind.REQUIRED_BLOB
    version_type: ClassVar[type] = BlobVersion
