from typing import Any
from uuid import UUID

from pydantic import TypeAdapter

from .errors import RequiredValueMissingError
from .kinds import ValueKind, value_adapter


def validate_payload(kind: ValueKind, value: Any) -> Any:
    """
    Checks a payload before a store persists it and returns the validated value.

    A missing value for a required kind raises `RequiredValueMissingError`;
    anything the kind's annotation rejects raises `pydantic_core.ValidationError`.
    """
    if kind.required and value is None:
        raise RequiredValueMissingError(kind)
    return value_adapter(kind).validate_python(value)


_subject_id_adapter = TypeAdapter(UUID)


def validate_subject_id(subject_id: Any) -> UUID:
    return _subject_id_adapter.validate_python(subject_id)
