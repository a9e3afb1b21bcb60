from .factory import sqlite_store_factory
from .handle import SQLiteVersionStore

__all__ = ["sqlite_store_factory", "SQLiteVersionStore"]
