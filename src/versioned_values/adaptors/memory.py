"""
An in-memory implementation of the `VersionStore` protocol.

Versions live in per-kind lists for the lifetime of the factory. Useful for
tests and for embedding the records without a database.
"""
from collections import defaultdict
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, List
from uuid import UUID
import asyncio
import itertools
import logging

from .. import history
from ..kinds import ValueKind
from ..models import version_type
from ..protocols import AnyVersion, Clock, VersionStore
from ..validation import validate_payload, validate_subject_id


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryVersionStore(VersionStore):
    def __init__(self, kind: ValueKind, clock: Clock | None = None):
        self.kind = ValueKind(kind)
        self.clock = clock or _utc_now
        self._versions: List[AnyVersion] = []
        self._by_id: Dict[int, AnyVersion] = {}
        self._by_subject: Dict[UUID, List[AnyVersion]] = defaultdict(list)
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    async def create_version(self, subject_id: UUID, value: Any) -> AnyVersion:
        subject_id = validate_subject_id(subject_id)
        value = validate_payload(self.kind, value)
        async with self._lock:
            version = version_type(self.kind).model_validate(
                {
                    "id": next(self._ids),
                    "subject_id": subject_id,
                    "added": self.clock(),
                    "value": value,
                }
            )
            self._versions.append(version)
            self._by_id[version.id] = version
            self._by_subject[subject_id].append(version)
        return version

    async def get_versions_for_subject(
        self, subject_id: UUID, *, order_by_added: bool = False
    ) -> List[AnyVersion]:
        versions = list(self._by_subject.get(validate_subject_id(subject_id), ()))
        if order_by_added:
            return history.order_by_added(versions)
        return versions

    async def get_version(self, version_id: int) -> AnyVersion | None:
        return self._by_id.get(version_id)

    async def metrics(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "version_count": len(self._versions),
            "subject_count": len(self._by_subject),
            "last_added": self._versions[-1].added if self._versions else None,
        }


@asynccontextmanager
async def memory_store_factory(*, clock: Clock | None = None) -> AsyncIterator:
    """
    Yields an `open_store` function bound to a private set of in-memory stores.
    Opening the same kind twice gives the same store; everything is discarded
    when the factory context exits.
    """
    stores: Dict[ValueKind, InMemoryVersionStore] = {}

    @asynccontextmanager
    async def open_store(kind: ValueKind) -> AsyncIterator[VersionStore]:
        kind = ValueKind(kind)
        if kind not in stores:
            stores[kind] = InMemoryVersionStore(kind, clock=clock)
        yield stores[kind]

    logging.info("In-memory version store factory opened")
    try:
        yield open_store
    finally:
        stores.clear()
        logging.info("In-memory version store factory closed")
