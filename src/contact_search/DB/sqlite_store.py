# contact_search/DB/sqlite_store.py
from __future__ import annotations
import sqlite3
import threading
from typing import Iterable, List, Optional
from .api import ContactStore, check_update_fields
from ..models import Contact

_COLUMNS = ("id", "name", "email", "phone", "company", "city", "state", "contact_type")

_SCHEMA = """
CREATE TABLE IF NOT EXISTS contacts (
  seq INTEGER PRIMARY KEY AUTOINCREMENT,
  id TEXT NOT NULL UNIQUE,
  name TEXT NOT NULL,
  email TEXT,
  phone TEXT,
  company TEXT,
  city TEXT,
  state TEXT,
  contact_type TEXT
);
"""

_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM contacts"
_UPSERT = (
    f"INSERT INTO contacts({', '.join(_COLUMNS)}) VALUES ({', '.join('?' * len(_COLUMNS))}) "
    "ON CONFLICT(id) DO UPDATE SET "
    + ", ".join(f"{c}=excluded.{c}" for c in _COLUMNS[1:])
)


def _row(c: Contact) -> tuple:
    return tuple(getattr(c, col) for col in _COLUMNS)


class SQLiteStore(ContactStore):
    """Contacts table in a single SQLite file. Rows list in insertion order."""
    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        # shared across Flask request threads; writes go through _lock
        self.conn: sqlite3.Connection = sqlite3.connect(db_path, check_same_thread=False)
        self._lock = threading.Lock()
        self.conn.executescript(_SCHEMA)

    # ---- Create ----
    def create(self, c: Contact) -> Contact:
        with self._lock:
            self.conn.execute(_UPSERT, _row(c))
            self.conn.commit()
        return c

    def bulk_create(self, items: Iterable[Contact]) -> int:
        rows = [_row(c) for c in items]
        with self._lock:
            self.conn.executemany(_UPSERT, rows)
            self.conn.commit()
        return len(rows)

    # ---- Read ----
    def read(self, cid: str) -> Contact:
        with self._lock:
            row = self.conn.execute(f"{_SELECT} WHERE id=?", (str(cid),)).fetchone()
        if row is None:
            raise KeyError(cid)
        return Contact(*row)

    def list_all(self) -> List[Contact]:
        with self._lock:
            rows = self.conn.execute(f"{_SELECT} ORDER BY seq").fetchall()
        return [Contact(*r) for r in rows]

    def count(self) -> int:
        with self._lock:
            return self.conn.execute("SELECT COUNT(*) FROM contacts").fetchone()[0]

    # ---- Update ----
    def update(self, cid: str, **fields: Optional[str]) -> Contact:
        check_update_fields(fields)
        if fields:
            sets = ", ".join(f"{k}=?" for k in fields)
            with self._lock:
                cur = self.conn.execute(
                    f"UPDATE contacts SET {sets} WHERE id=?", [*fields.values(), str(cid)]
                )
                self.conn.commit()
            if cur.rowcount == 0:
                raise KeyError(cid)
        return self.read(cid)

    # ---- Delete ----
    def delete(self, cid: str) -> bool:
        with self._lock:
            cur = self.conn.execute("DELETE FROM contacts WHERE id=?", (str(cid),))
            self.conn.commit()
        return cur.rowcount > 0

    # ---- lifecycle ----
    def close(self) -> None:
        self.conn.close()
