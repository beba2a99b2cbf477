from .api import ContactStore, make_store
from .memory_store import MemoryStore
from .sqlite_store import SQLiteStore

__all__ = ["ContactStore", "make_store", "MemoryStore", "SQLiteStore"]
