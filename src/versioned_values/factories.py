"""
This module selects a storage adaptor from a URL.

`memory://` (or no URL at all) gives the in-memory adaptor, `sqlite://` an
in-memory SQLite database and `sqlite:///path/to/file.db` a file database.
Keyword options are passed through to the selected adaptor's factory.
"""
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
import os
import urllib.parse

from .adaptors.memory import memory_store_factory
from .adaptors.sqlite import sqlite_store_factory


@asynccontextmanager
async def store_factory(url: str | None = None, **options: Any) -> AsyncIterator:
    if not url:
        url = "memory://"

    scheme = url.split("://", 1)[0] if "://" in url else ""

    if scheme == "memory":
        factory = memory_store_factory(**options)
    elif scheme == "sqlite":
        parsed = urllib.parse.urlparse(url)
        db_path = parsed.path
        if os.name == "nt" and db_path.startswith("/") and not db_path.startswith("//"):
            db_path = db_path[1:]
        if not db_path or db_path in ("/", "/:memory:", ":memory:"):
            db_path = ":memory:"
        factory = sqlite_store_factory(db_path, **options)
    else:
        raise ValueError(f"Unsupported scheme: {scheme}. Only 'memory' and 'sqlite' are supported.")

    async with factory as open_store:
        yield open_store
