from __future__ import annotations
import re
from typing import Iterable, List, Optional, Sequence

from . import config as CFG
from .cache import IndexCache, default_cache
from .models import Contact, MatchResult, SearchIndex
from .normalize import tokenize, collation_key

_ALL_DIGITS = re.compile(r"[0-9]+")
_WS = re.compile(r"\s")
_DIGIT = re.compile(r"[0-9]")


def _has_prefix(words: Iterable[str], token: str) -> bool:
    return any(w.startswith(token) for w in words)


def _has_substring(values: Iterable[str], token: str) -> bool:
    return any(token in v for v in values)


def _is_digits(token: str) -> bool:
    return _ALL_DIGITS.fullmatch(token) is not None


def _prefix_hit(token: str, idx: SearchIndex) -> bool:
    # name words -> company words -> email parts -> phone (numeric tokens only)
    if _has_prefix(idx.name_words, token):
        return True
    if _has_prefix(idx.company_words, token):
        return True
    if idx.email_local.startswith(token) or idx.email_domain.startswith(token):
        return True
    return _is_digits(token) and idx.phone_digits.startswith(token)


def classify_match(tokens: Sequence[str], idx: SearchIndex) -> Optional[int]:
    """
    Every token must match somewhere (AND across tokens, OR across fields).
    Returns 1 if any token hit a prefix, 2 if all hits were substrings,
    None if some token matched nothing.
    """
    any_prefix = False
    for token in tokens:
        if _prefix_hit(token, idx):
            any_prefix = True
            continue
        haystack = (idx.name_full, idx.email_local, idx.email_domain,
                    *idx.company_words, idx.phone_digits)
        if not _has_substring(haystack, token):
            return None
    return 1 if any_prefix else 2


def has_numeric_intent(tokens: Iterable[str]) -> bool:
    n = CFG.NUMERIC_INTENT_DIGITS
    return any(len(t) >= n and t[:n].isascii() and t[:n].isdigit() for t in tokens)


def field_priority(numeric_intent: bool) -> tuple[str, ...]:
    return CFG.NUMERIC_FIELD_PRIORITY if numeric_intent else CFG.FIELD_PRIORITY


def _field_matches(field: str, token: str, idx: SearchIndex, tier: int) -> bool:
    if field == "name":
        return _has_prefix(idx.name_words, token) if tier == 1 else token in idx.name_full
    if field == "email":
        parts = (idx.email_local, idx.email_domain)
        return _has_prefix(parts, token) if tier == 1 else _has_substring(parts, token)
    if field == "company":
        if tier == 1:
            return _has_prefix(idx.company_words, token)
        return _has_substring(idx.company_words, token)
    if field == "phone":
        if not _is_digits(token):
            return False
        if tier == 1:
            return idx.phone_digits.startswith(token)
        return token in idx.phone_digits
    return False


def best_field_for_tie(tokens: Sequence[str], idx: SearchIndex, tier: int,
                       numeric_intent: bool) -> str:
    """First field (in intent order) that some token matches at this tier; "name" if none."""
    for field in field_priority(numeric_intent):
        if any(_field_matches(field, t, idx, tier) for t in tokens):
            return field
    return "name"


def passes_search_gate(query: Optional[str]) -> bool:
    """True when the query is long enough (chars or digits) to filter on."""
    q = query.strip() if isinstance(query, str) else ""
    non_space = len(_WS.sub("", q))
    digits = len(_DIGIT.findall(q))
    return non_space >= CFG.MIN_QUERY_CHARS or digits >= CFG.MIN_QUERY_DIGITS


def rank(records: Optional[Sequence[Contact]], query: Optional[str],
         cache: Optional[IndexCache] = None) -> Optional[List[MatchResult]]:
    """
    Classify and order records for a query.
    Returns None when the query is too short or has no tokens (no filtering applies).
    """
    if not passes_search_gate(query):
        return None
    tokens = tokenize(query)
    if not tokens:
        return None

    if cache is None:
        cache = default_cache()
    numeric_intent = has_numeric_intent(tokens)
    order = {f: i for i, f in enumerate(field_priority(numeric_intent))}

    results: List[MatchResult] = []
    for record in records or ():
        idx = cache.get(record)
        tier = classify_match(tokens, idx)
        if tier is None:
            continue
        best = best_field_for_tie(tokens, idx, tier, numeric_intent)
        results.append(MatchResult(record=record, tier=tier, best_field=best))

    # stable: equal keys keep input order
    results.sort(key=lambda m: (m.tier, order[m.best_field],
                                collation_key(getattr(m.record, "name", None))))
    return results


def filter_and_rank(records: Optional[Sequence[Contact]], query: Optional[str],
                    *, cache: Optional[IndexCache] = None) -> List[Contact]:
    """
    Filter and order contacts for a type-ahead query.

    Short queries (fewer than 3 non-space chars and fewer than 3 digits) and
    queries with no tokens return ``records`` unchanged. Otherwise the matching
    records are returned ordered by tier, then best field, then name (A to Z).
    Never raises.
    """
    if records is None:
        return []
    ranked = rank(records, query, cache)
    if ranked is None:
        return records if isinstance(records, list) else list(records)
    return [m.record for m in ranked]
