# contact_search/engine.py
from __future__ import annotations

import os
import logging
from typing import Any, Dict, Iterable, List, Optional

from . import config as CFG
from .cache import IndexCache
from .models import CacheStats, Contact, MatchResult, SortState, new_contact_id, validate_contact_payload
from .loader import load_contacts
from .search import rank
from .sorting import apply_view
from .DB.api import ContactStore, make_store

log = logging.getLogger(__name__)


class EngineNotReady(RuntimeError):
    """Query or CRUD call before build() or load()."""


class Engine:
    """
    Thin orchestration layer that glues together:
      - contact storage (CRUD) via a ContactStore (SQLite or in-memory),
      - the per-contact search index cache (IndexCache),
      - the ranking/view pipeline (search.filter_and_rank, sorting.apply_view).

    Public API (used by CLI/Flask/GUI):
      * build(paths, ...): load contact files -> seed store
      * load(db_dsn):      attach an existing store
      * search(query, sort=None, filters=None): rows in table order
      * explain(query):    ranked MatchResults (tier, best field)
      * get/create/update/delete: contact CRUD with payload checks
      * shutdown():        close underlying resources

    Storage DSNs (via contact_search.DB.api.make_store):
      - "sqlite:///path/to/contacts.sqlite"
      - "memory://"
    """

    # ------------- lifecycle -------------

    def __init__(self, cache: Optional[IndexCache] = None) -> None:
        self._store: Optional[ContactStore] = None
        # one cache per engine keeps tests and app instances isolated
        self.cache: IndexCache = cache if cache is not None else IndexCache()

    # /* ~~~ Load contacts from files/folders and wire up storage ~~~ */
    def build(
        self,
        paths: Iterable[str] = (),
        *,
        contacts: Optional[Iterable[Contact]] = None,
        db_dsn: Optional[str] = None,          # e.g., "sqlite:///./contacts.sqlite" or "memory://"
        verbose: bool = False,
    ) -> None:
        if verbose or CFG.VERBOSE:
            logging.basicConfig(level=logging.INFO)

        paths = list(paths)
        if not paths and contacts is None:
            raise ValueError("build(): provide contact file paths or contacts")

        rows: List[Contact] = list(contacts or [])
        if paths:
            log.info("Loading contacts from %s", paths)
            rows.extend(load_contacts(paths))

        dsn = db_dsn or CFG.DEFAULT_DSN
        log.info("Initializing contact store: %s", dsn)
        self._store = make_store(dsn, contacts=rows)
        self.cache.reset()
        log.info("Engine build() complete: contacts=%d", self._store.count())

    # /* ~~~ Attach an already-populated store ~~~ */
    def load(self, *, db_dsn: str, verbose: bool = False) -> None:
        if verbose or CFG.VERBOSE:
            logging.basicConfig(level=logging.INFO)
        if not db_dsn.startswith("sqlite:///"):
            raise ValueError("load(): only sqlite:/// stores persist between runs")
        path = db_dsn.removeprefix("sqlite:///")
        if not os.path.exists(path):
            raise FileNotFoundError(path)

        log.info("Opening contact store: %s", db_dsn)
        self._store = make_store(db_dsn)
        self.cache.reset()
        log.info("Engine load() complete: contacts=%d", self._store.count())

    @property
    def ready(self) -> bool:
        return self._store is not None

    def _require_store(self) -> ContactStore:
        if self._store is None:
            raise EngineNotReady("Engine not initialized. Call build() or load() first.")
        return self._store

    # ------------- query -------------

    # /* ~~~ Rows for a query, in table order ~~~ */
    def search(
        self,
        query: str = "",
        *,
        sort: Optional[SortState] = None,
        filters: Optional[Dict[str, Iterable[str]]] = None,
    ) -> List[Contact]:
        rows = self._require_store().list_all()
        return apply_view(rows, query, sort, filters, cache=self.cache)

    def explain(self, query: str) -> List[MatchResult]:
        """Ranked matches with tier and tie-break field; [] when the query does not filter."""
        return rank(self._require_store().list_all(), query, self.cache) or []

    def count(self) -> int:
        return self._require_store().count()

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    # ------------- CRUD -------------

    def get(self, cid: str) -> Contact:
        return self._require_store().read(cid)

    def create(self, payload: Dict[str, Any]) -> Contact:
        fields = validate_contact_payload(payload)
        contact = Contact(id=new_contact_id(), **fields)
        self._require_store().create(contact)
        log.info("created contact %s", contact.id)
        return contact

    def update(self, cid: str, payload: Dict[str, Any]) -> Contact:
        store = self._require_store()
        fields = validate_contact_payload(payload, partial=True)
        store.read(cid)  # KeyError before any write
        return store.update(cid, **fields)

    def delete(self, cid: str) -> bool:
        deleted = self._require_store().delete(cid)
        if deleted:
            log.info("deleted contact %s", cid)
        return deleted

    # ------------- teardown -------------

    # /* ~~~ Close underlying resources (DB handles, etc.) ~~~ */
    def shutdown(self) -> None:
        try:
            if self._store:
                self._store.close()
        finally:
            self._store = None
            self.cache.reset()
            log.info("Engine shutdown complete")
