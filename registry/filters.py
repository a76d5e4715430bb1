from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from registry.schema import SEARCHABLE_FIELDS

# Categorical filter -> backend column it constrains by equality.
EQUALITY_COLUMNS: Dict[str, str] = {
    "gender": "gender",
    "location": "current_location",
    "occupation": "current_occupation",
}

ALL_SENTINELS = {"", "all"}


@dataclass(frozen=True)
class SearchFilters:
    term: str = ""
    gender: Optional[str] = None
    location: Optional[str] = None
    occupation: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.term and not self.gender and not self.location and not self.occupation


@dataclass(frozen=True)
class SearchQuery:
    or_filter: Optional[str] = None
    equals: List[Tuple[str, str]] = field(default_factory=list)
    order_column: str = "created_at"
    order_desc: bool = True


def _as_choice(value: object) -> Optional[str]:
    if value is None:
        return None
    s = str(value)
    if s.strip().lower() in ALL_SENTINELS:
        return None
    return s


def normalize_search(raw: dict) -> SearchFilters:
    return SearchFilters(
        term=(raw.get("term") or "").strip(),
        gender=_as_choice(raw.get("gender")),
        location=_as_choice(raw.get("location")),
        occupation=_as_choice(raw.get("occupation")),
    )


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def quote_value(value: str) -> str:
    """Double-quote a PostgREST logic-tree value so ``,`` ``(`` ``)`` stay literal."""
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def contains_pattern(term: str) -> str:
    return quote_value(f"%{escape_like(term)}%")


def build_or_filter(term: str, fields: Tuple[str, ...] = SEARCHABLE_FIELDS) -> str:
    pattern = contains_pattern(term)
    return ",".join(f"{f}.ilike.{pattern}" for f in fields)


def build_search_query(filters: SearchFilters) -> Optional[SearchQuery]:
    """Translate search input into backend predicates; ``None`` means "show nothing, ask nobody"."""
    if filters.is_empty():
        return None
    or_filter = build_or_filter(filters.term) if filters.term else None
    equals = [
        (column, value)
        for key, column in EQUALITY_COLUMNS.items()
        for value in [getattr(filters, key)]
        if value
    ]
    return SearchQuery(or_filter=or_filter, equals=equals)


class Debouncer:
    """Tracks how long an input value has been stable.

    ``remaining(value, now)`` is the time the caller still has to wait before
    ``value`` may trigger a query. Any change restarts the interval.
    """

    def __init__(self, interval: float = 0.5, initial: Optional[str] = "") -> None:
        self.interval = float(interval)
        self._value: Optional[str] = initial
        self._since: float = 0.0
        self._settled: Optional[str] = initial

    def remaining(self, value: str, now: float) -> float:
        if value == self._settled:
            # Returning to the settled value ends any pending change.
            self._value = value
            return 0.0
        if value != self._value:
            self._value = value
            self._since = now
        left = self.interval - (now - self._since)
        if left <= 0:
            self._settled = value
            return 0.0
        return left

    def settle(self, value: str) -> None:
        self._value = value
        self._settled = value

    @property
    def settled_value(self) -> Optional[str]:
        return self._settled
