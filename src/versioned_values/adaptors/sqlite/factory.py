from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Set
import asyncio
import logging
import uuid

import aiosqlite

from ...kinds import ValueKind
from ...protocols import Clock, VersionStore
from .handle import SQLiteVersionStore
from .schema import create_schema


async def _configure(conn: aiosqlite.Connection, cache_size_kib: int, busy_timeout_ms: int):
    await conn.execute(f"PRAGMA cache_size = {cache_size_kib};")
    await conn.execute(f"PRAGMA busy_timeout = {busy_timeout_ms};")


@asynccontextmanager
async def sqlite_store_factory(
    db_path: str,
    *,
    cache_size_kib: int = -16384,
    pool_size: int = 10,
    busy_timeout_ms: int = 5000,
    clock: Clock | None = None,
) -> AsyncIterator:
    """
    A factory for creating and managing version stores that are backed by a
    SQLite database. Used as an async context manager, it yields an
    `open_store` function; each call opens the store of one value kind, creating
    its table on first use. All connections are closed when the context exits.

    `":memory:"` opens a private shared-cache database that lives as long as
    the factory. Shared-cache databases lock whole tables and ignore the busy
    timeout, so a memory database has no read pool: its reads share the write
    connection and lock.
    """
    if not db_path:
        raise ValueError("`db_path` must be provided in the configuration.")

    is_memory_db = db_path == ":memory:"
    if is_memory_db:
        db_connect_string = f"file:memdb_{uuid.uuid4().hex}?mode=memory&cache=shared"
        read_connect_string = None
    else:
        db_connect_string = db_path
        read_connect_string = f"file:{db_path}?mode=ro"

    write_conn: aiosqlite.Connection | None = None
    read_pool: asyncio.Queue | None = None if is_memory_db else asyncio.Queue(maxsize=pool_size)
    connections: List[aiosqlite.Connection] = []
    write_lock = asyncio.Lock()
    init_lock = asyncio.Lock()
    ready_kinds: Set[ValueKind] = set()

    async def _initialize_db_resources():
        """Atomically opens the write connection and the read pool."""
        nonlocal write_conn
        async with init_lock:
            if write_conn is not None:
                return
            conn = await aiosqlite.connect(db_connect_string, uri=is_memory_db)
            connections.append(conn)
            await conn.execute("PRAGMA journal_mode=WAL;")
            await conn.execute("PRAGMA synchronous = NORMAL;")
            await _configure(conn, cache_size_kib, busy_timeout_ms)
            write_conn = conn

            if read_pool is None:
                logging.info(f"Version store initialized for {db_path}; reads share the write connection")
                return
            for _ in range(pool_size):
                read_conn = await aiosqlite.connect(read_connect_string, uri=True)
                connections.append(read_conn)
                await _configure(read_conn, cache_size_kib, busy_timeout_ms)
                await read_pool.put(read_conn)
            logging.info(f"Version store initialized for {db_path} with {pool_size} read connections")

    async def _ensure_schema(kind: ValueKind):
        if kind in ready_kinds:
            return
        async with write_lock:
            if kind not in ready_kinds:
                await create_schema(write_conn, kind)
                ready_kinds.add(kind)

    async def cleanup():
        """Closes every connection the factory opened, including any still checked out of the pool."""
        await asyncio.gather(*(conn.close() for conn in connections))
        connections.clear()
        logging.info(f"Version store for {db_path} closed")

    @asynccontextmanager
    async def open_store(kind: ValueKind) -> AsyncIterator[VersionStore]:
        kind = ValueKind(kind)
        await _initialize_db_resources()
        await _ensure_schema(kind)
        yield SQLiteVersionStore(
            kind=kind,
            write_conn=write_conn,
            write_lock=write_lock,
            read_pool=read_pool,
            clock=clock,
        )

    try:
        yield open_store
    finally:
        await cleanup()
