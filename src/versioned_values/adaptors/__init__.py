from .memory import InMemoryVersionStore, memory_store_factory
from .sqlite import SQLiteVersionStore, sqlite_store_factory

__all__ = [
    "InMemoryVersionStore",
    "memory_store_factory",
    "SQLiteVersionStore",
    "sqlite_store_factory",
]
