from __future__ import annotations
import functools
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence

from . import config as CFG
from .cache import IndexCache
from .models import Contact, SortState
from .normalize import collation_key, normalize_phone
from .search import filter_and_rank, passes_search_gate

_NUM_CHUNK = re.compile(r"([0-9]+)")


def _num_key(digits: str) -> tuple:
    # numeric order without int(): shorter (zero-stripped) runs are smaller
    d = digits.lstrip("0")
    return (len(d), d)


def _natural_key(s: str) -> tuple:
    # "item 10" after "item 9"; split() alternates text, number, text, ...
    return tuple(_num_key(p) if i % 2 else p for i, p in enumerate(_NUM_CHUNK.split(collation_key(s))))


def _blank(v: Any) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


def compare_values(a: Any, b: Any, comparator: str = "text", direction: str = "asc") -> int:
    """
    Three-way compare two cell values.
    Blank values go last whatever the direction.
    """
    a_blank, b_blank = _blank(a), _blank(b)
    if a_blank and b_blank:
        return 0
    if a_blank:
        return 1
    if b_blank:
        return -1

    a, b = str(a).strip(), str(b).strip()
    if comparator == "emailLocal":
        result = _cmp(collation_key(a.split("@")[0]), collation_key(b.split("@")[0]))
    elif comparator == "phoneDigits":
        result = _cmp(_num_key(normalize_phone(a)), _num_key(normalize_phone(b)))
    else:
        result = _cmp(_natural_key(a), _natural_key(b))

    return -result if direction == "desc" else result


def sort_contacts(records: Sequence[Contact], sort: Optional[SortState]) -> List[Contact]:
    """Stable column sort. Unknown columns or no sort keep the input order."""
    if sort is None or sort.key not in CFG.SORT_COMPARATORS:
        return list(records)
    comparator = CFG.SORT_COMPARATORS[sort.key]

    def cmp(x: Contact, y: Contact) -> int:
        return compare_values(x.value_for(sort.key), y.value_for(sort.key), comparator, sort.dir)

    return sorted(records, key=functools.cmp_to_key(cmp))


def sort_by_name(records: Sequence[Contact]) -> List[Contact]:
    return sorted(records, key=lambda c: collation_key(c.name))


def toggle_sort(current: Optional[SortState], key: str) -> Optional[SortState]:
    """Header click cycle: other column -> asc, asc -> desc, desc -> off."""
    if current is None or current.key != key:
        return SortState(key=key, dir="asc")
    if current.dir == "asc":
        return SortState(key=key, dir="desc")
    return None


def apply_column_filters(records: Iterable[Contact],
                         filters: Optional[Dict[str, Iterable[str]]]) -> List[Contact]:
    """Keep records whose value is selected in every filtered column."""
    active = {col: set(vals) for col, vals in (filters or {}).items() if vals}
    if not active:
        return list(records)

    def keep(c: Contact) -> bool:
        for col, selected in active.items():
            raw = c.value_for(col)
            if str(raw if raw is not None else "").strip() not in selected:
                return False
        return True

    return [c for c in records if keep(c)]


def apply_view(records: Sequence[Contact], query: Optional[str],
               sort: Optional[SortState] = None,
               filters: Optional[Dict[str, Iterable[str]]] = None,
               *, cache: Optional[IndexCache] = None) -> List[Contact]:
    """
    Rows as the contacts table shows them.

    Search ranking first, then column filters. Without an active search the rows
    follow the chosen column sort, or name A to Z. With an active search the
    relevance order stands unless the user picked a column sort.
    """
    rows = filter_and_rank(records, query, cache=cache)
    rows = apply_column_filters(rows, filters)

    if not passes_search_gate(query):
        return sort_contacts(rows, sort) if sort else sort_by_name(rows)
    if sort:
        return sort_contacts(rows, sort)
    return rows
