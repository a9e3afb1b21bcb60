import logging

import aiosqlite

from ...kinds import ValueKind
from .codec import column_type, table_name


async def create_schema(conn: aiosqlite.Connection, kind: ValueKind):
    """Ensures the table and subject index for `kind` exist."""
    table = table_name(kind)
    await conn.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {table} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            subject_id TEXT NOT NULL,
            added TEXT NOT NULL,
            value {column_type(kind)}
        )
    """
    )
    # "All versions of subject X" is the dominant query.
    await conn.execute(
        f"CREATE INDEX IF NOT EXISTS idx_{table}_subject ON {table} (subject_id)"
    )
    await conn.commit()
    logging.info(f"Schema ready for kind '{kind.value}' in table {table}")
