from __future__ import annotations
from typing import Any

from .models import SearchIndex
from .normalize import normalize_text, normalize_phone


def _words(s: str) -> tuple[str, ...]:
    return tuple(w for w in s.split() if w)


def build_index(record: Any) -> SearchIndex:
    """
    Precompute the normalized views of one contact used for matching.

    Pure: missing or non-string fields become "" / (), and two records with the
    same searchable values produce equal indexes.
    """
    name_full = normalize_text(getattr(record, "name", None))
    email = normalize_text(getattr(record, "email", None))
    local, _, domain = email.partition("@")
    company = normalize_text(getattr(record, "company", None))

    return SearchIndex(
        name_words=_words(name_full),
        name_full=name_full,
        email_local=local,
        email_domain=domain,
        company_words=_words(company),
        phone_digits=normalize_phone(getattr(record, "phone", None)),
    )
