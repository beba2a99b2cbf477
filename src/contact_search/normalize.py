from __future__ import annotations
import re
import unicodedata
from typing import Any, List

_WS = re.compile(r"\s+")
# keep word chars, whitespace, "@", ".", "-". \w is Unicode-aware on purpose:
# accented letters survive ("José" -> "josé") instead of being stripped.
_STRIP = re.compile(r"[^\w\s@.\-]")
_NON_DIGIT = re.compile(r"[^0-9]")
_TOKEN_SPLIT = re.compile(r"[\s\-_.]+")


def normalize_text(text: Any) -> str:
    """
    Canonical form for matching:
      * lowercase, trim, collapse whitespace runs to one space
      * drop everything except word chars, whitespace, '@', '.', '-'
    Anything that is not a non-empty string normalizes to "".
    """
    if not text or not isinstance(text, str):
        return ""
    s = _WS.sub(" ", text.lower().strip())
    return _STRIP.sub("", s)


def normalize_phone(text: Any) -> str:
    """Digits only, in input order."""
    if not text or not isinstance(text, str):
        return ""
    return _NON_DIGIT.sub("", text)


def tokenize(query: Any) -> List[str]:
    """Split a raw query into normalized tokens (order kept, duplicates kept)."""
    return [t for t in _TOKEN_SPLIT.split(normalize_text(query)) if t]


def collation_key(text: Any) -> str:
    """Case- and accent-insensitive sort key ("Émile" sorts with "emile")."""
    if not text or not isinstance(text, str):
        return ""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold().strip()


def format_phone_number(phone: Any) -> str:
    """(###) ###-#### for US numbers; anything else is returned as given."""
    digits = normalize_phone(phone)
    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    if len(digits) == 11 and digits[0] == "1":
        return f"({digits[1:4]}) {digits[4:7]}-{digits[7:]}"
    if digits:
        return phone
    return ""


def is_valid_phone_number(phone: Any) -> bool:
    digits = normalize_phone(phone)
    return len(digits) == 10 or (len(digits) == 11 and digits[0] == "1")
