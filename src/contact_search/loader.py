from __future__ import annotations
import csv
import json
import logging
import os
from typing import Any, Iterable, Iterator, List

from .config import CONTACT_FILE_EXTS
from .models import Contact

log = logging.getLogger(__name__)


def _iter_contact_files(paths: Iterable[str]) -> Iterator[str]:
    """Yield contact files: plain file paths as given, folders walked recursively (sorted)."""
    for p in paths:
        if os.path.isfile(p):
            yield p
            continue
        if not os.path.isdir(p):
            log.warning("contact source not found: %s", p)
            continue
        for dirpath, dirnames, filenames in os.walk(os.path.abspath(p)):
            dirnames.sort()
            for fn in sorted(filenames):
                if fn.lower().endswith(CONTACT_FILE_EXTS):
                    yield os.path.join(dirpath, fn)


def _read_json(path: str) -> List[Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("contacts", [])
    if not isinstance(data, list):
        raise ValueError("expected a list of contacts or {'contacts': [...]}")
    return data


def _read_csv(path: str) -> List[Any]:
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        # empty cells -> None so optional fields stay unset
        return [{k: (v or None) for k, v in row.items() if k} for row in csv.DictReader(f)]


def load_contacts(paths: Iterable[str]) -> List[Contact]:
    """
    Read contacts from .json / .csv files (or folders of them).
    Rows without a name are skipped; rows without an id get a fresh one.
    Unreadable files are logged and skipped.
    """
    contacts: List[Contact] = []
    files = 0
    for path in _iter_contact_files(paths):
        try:
            rows = _read_csv(path) if path.lower().endswith(".csv") else _read_json(path)
        except (OSError, ValueError, csv.Error) as exc:
            log.warning("skipping %s: %s", path, exc)
            continue

        files += 1
        for i, row in enumerate(rows):
            if not isinstance(row, dict) or not str(row.get("name") or "").strip():
                log.warning("%s: row %d has no name, skipped", path, i)
                continue
            contacts.append(Contact.from_dict(row))

    log.info("loaded %d contacts from %d file(s)", len(contacts), files)
    return contacts
