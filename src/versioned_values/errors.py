from typing import Optional

from .kinds import ValueKind

REQUIRED_VALUE_MISSING = "required value missing"


class VersionValidationError(ValueError):
    """A version payload broke a rule of its value kind."""

    def __init__(self, reason: str, kind: Optional[ValueKind] = None):
        self.reason = reason
        self.kind = kind
        message = reason if kind is None else f"{reason} for kind '{kind.value}'"
        super().__init__(message)


class RequiredValueMissingError(VersionValidationError):
    def __init__(self, kind: Optional[ValueKind] = None):
        super().__init__(REQUIRED_VALUE_MISSING, kind)
