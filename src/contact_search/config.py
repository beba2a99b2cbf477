from __future__ import annotations
import os

# /* ~~~ search gate: below both thresholds the list is returned unfiltered ~~~ */
MIN_QUERY_CHARS: int = 3
MIN_QUERY_DIGITS: int = 3

# a token starting with this many digits signals a phone lookup
NUMERIC_INTENT_DIGITS: int = 3

# Tie-break field order (first = strongest)
FIELD_PRIORITY = ("name", "email", "company", "phone")
NUMERIC_FIELD_PRIORITY = ("phone", "name", "email", "company")

# Table columns the view layer can sort on, with the comparator each uses
SORT_COMPARATORS = {
    "name": "text",
    "email": "emailLocal",
    "phone": "phoneDigits",
    "company": "text",
    "city": "text",
    "state": "text",
    "contactType": "text",
}

# Columns that accept value filters (?city=Austin&city=Dallas)
FILTER_COLUMNS = ("company", "city", "state", "contactType")

# /* ~~~ storage ~~~ */
DEFAULT_DSN: str = os.environ.get("CONTACT_SEARCH_DSN", "memory://")
CONTACT_FILE_EXTS = (".json", ".csv")

# /* ~~~ UI ~~~ */
DEBOUNCE_MS: int = 200
WEB_HOST: str = "127.0.0.1"
WEB_PORT: int = 8000

VERBOSE: bool = os.environ.get("CONTACT_SEARCH_VERBOSE") == "1"
