"""Module-level API over a single Engine (for scripts and the desktop GUI)."""
from __future__ import annotations
from contact_search.engine import Engine, EngineNotReady
from contact_search.models import Contact, SortState

_engine: Engine | None = None

def initialize(paths: list[str], db: str | None = None, verbose: bool = False) -> int:
    """Load contacts from files/folders into a fresh engine. Returns the contact count."""
    global _engine
    eng = Engine()
    eng.build(paths, db_dsn=db, verbose=verbose)
    if _engine is not None:
        _engine.shutdown()
    _engine = eng
    return eng.count()

def search(query: str, sort: SortState | None = None) -> list[Contact]:
    """Contacts for `query` in table order (optionally column-sorted)."""
    if _engine is None:
        raise EngineNotReady("Engine not initialized. Call initialize(...) first.")
    return _engine.search(query, sort=sort)

def shutdown() -> None:
    global _engine
    if _engine is not None:
        _engine.shutdown()
        _engine = None
