from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

import pandas as pd

from registry.errors import BackendError, Notification
from registry.schema import TABLE_COLUMNS

logger = logging.getLogger(__name__)

ALWAYS_VISIBLE = frozenset({"name"})


@dataclass(frozen=True)
class TableState:
    sort_column: Optional[str] = None
    sort_desc: bool = False
    name_filter: str = ""
    hidden_columns: FrozenSet[str] = field(default_factory=frozenset)
    page_index: int = 0
    page_size: int = 10


@dataclass(frozen=True)
class TableView:
    page: pd.DataFrame
    filtered: pd.DataFrame
    columns: List[str]
    page_index: int
    page_count: int
    total_rows: int

    @property
    def filtered_rows(self) -> int:
        return int(len(self.filtered))

    @property
    def can_previous(self) -> bool:
        return self.page_index > 0

    @property
    def can_next(self) -> bool:
        return self.page_index + 1 < self.page_count


def toggle_sort(state: TableState, column: str) -> TableState:
    """Header click: ascending first, then flip between ascending and descending."""
    if state.sort_column == column and not state.sort_desc:
        return replace(state, sort_desc=True)
    return replace(state, sort_column=column, sort_desc=False)


def toggle_column(state: TableState, column: str, visible: bool) -> TableState:
    if column in ALWAYS_VISIBLE:
        return state
    hidden = set(state.hidden_columns)
    if visible:
        hidden.discard(column)
    else:
        hidden.add(column)
    return replace(state, hidden_columns=frozenset(hidden))


def set_name_filter(state: TableState, value: str) -> TableState:
    value = value or ""
    if value == state.name_filter:
        return state
    return replace(state, name_filter=value, page_index=0)


def visible_columns(state: TableState, columns: Sequence[str] = TABLE_COLUMNS) -> List[str]:
    return [c for c in columns if c in ALWAYS_VISIBLE or c not in state.hidden_columns]


def profiles_frame(records: Sequence[Dict[str, Any]], columns: Sequence[str] = TABLE_COLUMNS) -> pd.DataFrame:
    cols = ["id"] + [c for c in columns if c != "id"]
    df = pd.DataFrame(list(records))
    for c in cols:
        if c not in df.columns:
            df[c] = None
    return df


def _sort_key(series: pd.Series) -> pd.Series:
    numeric = pd.to_numeric(series, errors="coerce")
    if series.notna().any() and numeric[series.notna()].notna().all():
        return numeric
    return series.astype("string").str.lower()


def apply_table_state(df: pd.DataFrame, state: TableState, columns: Sequence[str] = TABLE_COLUMNS) -> TableView:
    total = int(len(df))
    filtered = df
    needle = (state.name_filter or "").strip()
    if needle and "name" in filtered.columns:
        filtered = filtered[filtered["name"].fillna("").astype(str).str.contains(needle, case=False, regex=False, na=False)]

    if state.sort_column and state.sort_column in filtered.columns:
        filtered = filtered.sort_values(
            state.sort_column,
            ascending=not state.sort_desc,
            kind="stable",
            na_position="last",
            key=_sort_key,
        )

    page_size = max(1, int(state.page_size))
    page_count = max(1, math.ceil(len(filtered) / page_size))
    page_index = min(max(0, int(state.page_index)), page_count - 1)
    start = page_index * page_size
    page = filtered.iloc[start : start + page_size]

    return TableView(
        page=page,
        filtered=filtered,
        columns=visible_columns(state, columns),
        page_index=page_index,
        page_count=page_count,
        total_rows=total,
    )


def remove_profile(store: Any, records: List[Dict[str, Any]], profile_id: str) -> Tuple[List[Dict[str, Any]], Notification]:
    """Delete on the backend, then drop the row locally; a failed delete leaves the list untouched."""
    try:
        store.delete_profile(profile_id)
    except BackendError as exc:
        logger.exception("Error deleting profile %s", profile_id)
        return records, Notification.error(exc.user_message)
    remaining = [r for r in records if str(r.get("id")) != str(profile_id)]
    return remaining, Notification.success("Profile deleted successfully")
