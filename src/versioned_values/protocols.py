"""
This module defines the abstract protocol for version storage.

The records in `models` and `required` never persist themselves. A
`VersionStore` allocates identities, stamps the time a value was added and
hands back immutable records. By coding against this `Protocol` the callers
stay decoupled from the backend, whether that is the in-memory adaptor, the
SQLite adaptor or something else entirely.
"""
from datetime import datetime
from typing import Any, Callable, Dict, List, Protocol, Union
from uuid import UUID

from .kinds import ValueKind
from .models import Version
from .required import RequiredVersion

AnyVersion = Union[Version, RequiredVersion]
Clock = Callable[[], datetime]


class VersionStore(Protocol):
    """
    Defines the contract that all storage adapters must implement.
    A store holds the versions of exactly one value kind.
    """
    kind: ValueKind

    async def create_version(self, subject_id: UUID, value: Any) -> AnyVersion:
        ...

    async def get_versions_for_subject(
        self, subject_id: UUID, *, order_by_added: bool = False
    ) -> List[AnyVersion]:
        ...

    async def get_version(self, version_id: int) -> AnyVersion | None:
        ...

    async def metrics(self) -> Dict[str, Any]:
        ...
