# contact_search/DB/api.py
from __future__ import annotations
import os
from typing import Protocol, Iterable, List, Optional

from ..models import Contact


class ContactStore(Protocol):
    # Create
    def create(self, c: Contact) -> Contact: ...
    def bulk_create(self, items: Iterable[Contact]) -> int: ...
    # Read
    def read(self, cid: str) -> Contact: ...
    def list_all(self) -> List[Contact]: ...
    def count(self) -> int: ...
    # Update
    def update(self, cid: str, **fields: Optional[str]) -> Contact: ...
    # Delete
    def delete(self, cid: str) -> bool: ...
    # lifecycle
    def close(self) -> None: ...


# columns a caller may change through update()
UPDATABLE = ("name", "email", "phone", "company", "city", "state", "contact_type")


def check_update_fields(fields: dict) -> None:
    unknown = sorted(set(fields) - set(UPDATABLE))
    if unknown:
        raise ValueError(f"Unknown contact field(s): {', '.join(unknown)}")


def make_store(dsn: str, *, contacts: Optional[Iterable[Contact]] = None) -> ContactStore:
    """
    Factory:
      - sqlite:///path -> SQLiteStore (file and table created if missing)
      - memory://      -> MemoryStore (seeded with `contacts` if given)
    """
    if dsn.startswith("sqlite:///"):
        from .sqlite_store import SQLiteStore
        path = dsn.removeprefix("sqlite:///")
        os.makedirs(os.path.dirname(os.path.abspath(path)) or ".", exist_ok=True)
        store = SQLiteStore(path)
        if contacts is not None:
            store.bulk_create(contacts)
        return store

    if dsn.startswith("memory://"):
        from .memory_store import MemoryStore
        return MemoryStore(contacts=contacts)

    raise ValueError(f"Unsupported store DSN: {dsn}")
