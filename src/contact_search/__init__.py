"""
Contact search engine.

Type-ahead filtering and ranking for contact lists: normalized tokens are
matched against a cached per-contact index, matches are tiered (prefix beats
substring), and ties are broken by the field that explains the match and then
by name.

Main entry points:
    filter_and_rank(contacts, query): ordered subset of contacts for a query
    IndexCache: memoized per-contact search indexes
    Engine: store + cache + ranking, used by the web app, CLI and GUI

Example:
    from contact_search import Contact, filter_and_rank

    rows = [Contact(id="1", name="Amy Smith", phone="555-0100")]
    filter_and_rank(rows, "smi")
"""

from .cache import IndexCache, clear_index_cache, get_cache_stats, get_memoized_index
from .engine import Engine, EngineNotReady
from .index import build_index
from .models import CacheStats, Contact, MatchResult, SearchIndex, SortState
from .normalize import normalize_phone, normalize_text, tokenize
from .search import best_field_for_tie, classify_match, filter_and_rank, rank
from .sorting import apply_view, toggle_sort

__version__ = "1.0.0"
__all__ = [
    "Contact", "SearchIndex", "MatchResult", "CacheStats", "SortState",
    "normalize_text", "normalize_phone", "tokenize", "build_index",
    "IndexCache", "get_memoized_index", "clear_index_cache", "get_cache_stats",
    "classify_match", "best_field_for_tie", "rank", "filter_and_rank",
    "apply_view", "toggle_sort", "Engine", "EngineNotReady",
]
