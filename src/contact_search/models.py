from __future__ import annotations
import re
import uuid
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple

# Searchable fields, in fingerprint order
SEARCH_FIELDS = ("name", "email", "company", "phone")

# wire name -> attribute name
_WIRE_ALIASES = {"contactType": "contact_type"}

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def new_contact_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Contact:
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    contact_type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Contact":
        """Build a Contact from a loosely-typed mapping (JSON row, CSV row, form body)."""
        kw: Dict[str, Any] = {}
        for key, value in data.items():
            attr = _WIRE_ALIASES.get(key, key)
            if attr in _CONTACT_FIELDS:
                kw[attr] = value
        for attr in _TEXT_FIELDS:
            kw[attr] = _as_text(kw.get(attr))
        cid = kw.get("id")
        kw["id"] = str(cid) if cid not in (None, "") else new_contact_id()
        name = kw.get("name")
        kw["name"] = name if isinstance(name, str) else ("" if name is None else str(name))
        return cls(**kw)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["contactType"] = d.pop("contact_type")
        return d

    def value_for(self, column: str) -> Any:
        """Column value by wire name (used by sort and filters)."""
        return getattr(self, _WIRE_ALIASES.get(column, column), None)


_CONTACT_FIELDS = {f for f in Contact.__dataclass_fields__}
# optional string columns; JSON files often carry phones as numbers
_TEXT_FIELDS = ("email", "phone", "company", "city", "state", "contact_type")


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    return None


@dataclass(frozen=True)
class SearchIndex:
    name_words: Tuple[str, ...]
    name_full: str
    email_local: str
    email_domain: str
    company_words: Tuple[str, ...]
    phone_digits: str


@dataclass(frozen=True)
class MatchResult:
    record: Contact
    tier: int           # 1 = prefix hit somewhere, 2 = substring only
    best_field: str     # name | email | company | phone


@dataclass(frozen=True)
class CacheStats:
    size: int
    keys: List[str] = field(default_factory=list)
    hits: int = 0
    misses: int = 0
    evictions: int = 0


@dataclass(frozen=True)
class SortState:
    key: str
    dir: str = "asc"    # "asc" | "desc"


def validate_contact_payload(data: Dict[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    """
    Check a create/update body and return the cleaned attribute dict.
    Raises ValueError with a user-facing message on the first problem.
    """
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")

    out: Dict[str, Any] = {}
    for key, value in data.items():
        attr = _WIRE_ALIASES.get(key, key)
        if attr == "id" or attr not in _CONTACT_FIELDS:
            continue
        if value is not None and not isinstance(value, str):
            raise ValueError(f"Field {key!r} must be a string")
        out[attr] = value.strip() if isinstance(value, str) else value

    if not partial or "name" in out:
        if not out.get("name"):
            raise ValueError("Name is required")
    if not partial or "email" in out:
        if not out.get("email") or not _EMAIL_RE.match(out["email"]):
            raise ValueError("Valid email is required")
    return out
