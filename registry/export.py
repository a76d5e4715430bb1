"""CSV serialisation for table, search and single-profile exports."""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from registry.schema import BOOLEAN_FIELDS

CSV_MIME = "text/csv"


def _cell(field: str, value: Any) -> Any:
    # Boolean fields default to false, so a missing flag reads "No" as on the detail view.
    if isinstance(value, bool) or field in BOOLEAN_FIELDS:
        return "Yes" if bool(value) else "No"
    return value


def _frame(fields: Sequence[str], rows: Iterable[Sequence[Any]]) -> pd.DataFrame:
    # object dtype keeps ints as ints (no 34 -> 34.0 upcast when a column has gaps)
    return pd.DataFrame(list(rows), columns=list(fields), dtype=object)


def _to_text(df: pd.DataFrame, *, header: bool) -> str:
    text = df.to_csv(index=False, header=header, lineterminator="\n", na_rep="")
    return text[:-1] if text.endswith("\n") else text


def to_csv_text(fields: Sequence[str], records: Iterable[Mapping[str, Any]]) -> str:
    """Header of field names then one line per record.

    Values holding a comma, a double quote or a line break are quoted with
    inner quotes doubled; booleans render as Yes/No; absent values are empty.
    """
    fields = list(fields)
    rows = [[_cell(f, rec.get(f)) for f in fields] for rec in records]
    if not rows:
        return ",".join(fields)
    return _to_text(_frame(fields, rows), header=True)


def profile_to_csv_text(profile: Mapping[str, Any], fields: Optional[Sequence[str]] = None) -> str:
    """Single-record export: one ``key,value`` line per field."""
    keys: List[str] = list(fields) if fields is not None else list(profile.keys())
    rows = [[k, _cell(k, profile.get(k))] for k in keys]
    return _to_text(_frame(["field", "value"], rows), header=False)


def to_csv_bytes(text: str) -> bytes:
    return text.encode("utf-8")


def slugify_name(name: Optional[str]) -> str:
    return re.sub(r"\s+", "-", (name or "").strip()) or "unnamed"


def export_filename(context: str, suffix: Optional[str] = None, today: Optional[date] = None) -> str:
    """``<context>-<YYYY-MM-DD>.csv``, or ``<context>-<suffix>.csv`` when a suffix is given."""
    tail = suffix if suffix else (today or date.today()).isoformat()
    return f"{context}-{tail}.csv"


def profile_export_filename(profile: Mapping[str, Any]) -> str:
    return export_filename("profile", slugify_name(profile.get("name")))
