# contact_search/DB/memory_store.py
from __future__ import annotations
import dataclasses
from typing import Dict, Iterable, List, Optional
from .api import ContactStore, check_update_fields
from ..models import Contact

class MemoryStore(ContactStore):
    """Simple in-memory CRUD (useful for tests or ephemeral runs). Keeps insertion order."""
    def __init__(self, contacts: Optional[Iterable[Contact]]=None) -> None:
        self._rows: Dict[str, Contact] = {}
        if contacts:
            self.bulk_create(contacts)

    # C
    def create(self, c: Contact) -> Contact:
        self._rows[str(c.id)] = c
        return c

    def bulk_create(self, items: Iterable[Contact]) -> int:
        n = 0
        for c in items:
            self._rows[str(c.id)] = c; n += 1
        return n

    # R
    def read(self, cid: str) -> Contact:
        try:
            return self._rows[str(cid)]
        except KeyError:
            raise KeyError(cid)

    def list_all(self) -> List[Contact]:
        return list(self._rows.values())

    def count(self) -> int:
        return len(self._rows)

    # U
    def update(self, cid: str, **fields: Optional[str]) -> Contact:
        check_update_fields(fields)
        # new object: the index cache fingerprints field values, not identity
        updated = dataclasses.replace(self.read(cid), **fields)
        self._rows[str(cid)] = updated
        return updated

    # D
    def delete(self, cid: str) -> bool:
        return self._rows.pop(str(cid), None) is not None

    def close(self) -> None:
        self._rows.clear()
