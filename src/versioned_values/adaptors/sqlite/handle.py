"""
This module provides the SQLite-specific implementation of the `VersionStore`
protocol. It is responsible for all direct database interactions for one value
kind: inserting versions, reading a subject's history and reporting metrics.
Writes go through a single shared connection guarded by a lock, which is what
makes the `AUTOINCREMENT` id allocation safe under concurrent writers.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, List
from uuid import UUID
import asyncio
import logging

import aiosqlite
import pydantic_core

from ... import history
from ...errors import VersionValidationError
from ...kinds import ValueKind
from ...models import version_type
from ...protocols import AnyVersion, Clock, VersionStore
from ...validation import validate_payload, validate_subject_id
from .codec import table_name, to_sql


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SQLiteVersionStore(VersionStore):
    """
    A store for the versions of one kind, using a dedicated write connection
    and a pool of read connections shared with the other stores of a factory.
    """

    def __init__(
        self,
        kind: ValueKind,
        write_conn: aiosqlite.Connection,
        write_lock: asyncio.Lock,
        read_pool: asyncio.Queue | None,
        clock: Clock | None = None,
    ):
        self.kind = ValueKind(kind)
        self.table = table_name(self.kind)
        self.write_conn = write_conn
        self.write_lock = write_lock
        self.read_pool = read_pool
        self.clock = clock or _utc_now

    @asynccontextmanager
    async def _read_conn(self) -> AsyncIterator[aiosqlite.Connection]:
        """Provides a connection from the read pool, or the write connection when there is no pool."""
        if self.read_pool is None:
            async with self.write_lock:
                yield self.write_conn
            return
        conn = await self.read_pool.get()
        try:
            yield conn
        finally:
            await self.read_pool.put(conn)

    def _materialize(self, row) -> AnyVersion | None:
        version_id, subject_id, added, value = row
        try:
            return version_type(self.kind).model_validate(
                {"id": version_id, "subject_id": subject_id, "added": added, "value": value}
            )
        except (pydantic_core.ValidationError, VersionValidationError) as e:
            logging.warning(f"Skipping invalid version row {version_id} in {self.table}: {e}")
            return None

    async def create_version(self, subject_id: UUID, value: Any) -> AnyVersion:
        """Validates, stamps and persists a new version, returning the stored record."""
        subject_id = validate_subject_id(subject_id)
        value = validate_payload(self.kind, value)
        async with self.write_lock:
            added = self.clock()
            try:
                cursor = await self.write_conn.execute(
                    f"INSERT INTO {self.table} (subject_id, added, value) VALUES (?, ?, ?)",
                    (str(subject_id), added.isoformat(), to_sql(value)),
                )
                version_id = cursor.lastrowid
                await cursor.close()
                await self.write_conn.commit()
            except Exception as e:
                await self.write_conn.rollback()
                logging.error(f"Failed to insert version into {self.table}: {e}")
                raise
        return version_type(self.kind).model_validate(
            {"id": version_id, "subject_id": subject_id, "added": added, "value": value}
        )

    async def get_versions_for_subject(
        self, subject_id: UUID, *, order_by_added: bool = False
    ) -> List[AnyVersion]:
        subject_id = validate_subject_id(subject_id)
        versions = []
        async with self._read_conn() as conn:
            async with conn.execute(
                f"SELECT id, subject_id, added, value FROM {self.table} WHERE subject_id = ? ORDER BY id",
                (str(subject_id),),
            ) as cursor:
                async for row in cursor:
                    version = self._materialize(row)
                    if version is not None:
                        versions.append(version)
        if order_by_added:
            return history.order_by_added(versions)
        return versions

    async def get_version(self, version_id: int) -> AnyVersion | None:
        async with self._read_conn() as conn:
            async with conn.execute(
                f"SELECT id, subject_id, added, value FROM {self.table} WHERE id = ?",
                (version_id,),
            ) as cursor:
                row = await cursor.fetchone()
        if row is None:
            return None
        return self._materialize(row)

    async def metrics(self) -> Dict[str, Any]:
        async with self._read_conn() as conn:
            async with conn.execute(
                f"SELECT COUNT(*), COUNT(DISTINCT subject_id) FROM {self.table}"
            ) as cursor:
                version_count, subject_count = await cursor.fetchone()
            async with conn.execute(
                f"SELECT added FROM {self.table} ORDER BY id DESC LIMIT 1"
            ) as cursor:
                row = await cursor.fetchone()
        return {
            "kind": self.kind,
            "version_count": version_count,
            "subject_count": subject_count,
            "last_added": datetime.fromisoformat(row[0]) if row else None,
        }
