from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from registry.charts import gender_chart, to_vega_spec, top_values_chart
from registry.schema import to_utc_timestamp

GENDER_BUCKETS = ("Male", "Female", "Other")


def _non_blank(series: pd.Series) -> pd.Series:
    s = series[series.notna()].astype(str)
    return s[s.str.strip() != ""]


def value_counts_in_order(df: pd.DataFrame, column: str) -> pd.DataFrame:
    """Counts per non-blank value, most frequent first; ties keep first-seen order."""
    if df.empty or column not in df.columns:
        return pd.DataFrame(columns=[column, "count"])
    values = _non_blank(df[column])
    if values.empty:
        return pd.DataFrame(columns=[column, "count"])
    counts = values.groupby(values, sort=False).size().sort_values(ascending=False, kind="stable")
    return counts.rename_axis(column).reset_index(name="count")


def top_value(df: pd.DataFrame, column: str) -> Optional[str]:
    counts = value_counts_in_order(df, column)
    if counts.empty:
        return None
    return str(counts[column].iloc[0])


def gender_counts(df: pd.DataFrame) -> Dict[str, int]:
    if df.empty or "gender" not in df.columns:
        return {g: 0 for g in GENDER_BUCKETS}
    gender = df["gender"]
    male = int((gender == "Male").sum())
    female = int((gender == "Female").sum())
    return {"Male": male, "Female": female, "Other": int(len(df)) - male - female}


def recent_entry_count(df: pd.DataFrame, now: Any, days: int = 30) -> int:
    if df.empty or "date_of_entry" not in df.columns:
        return 0
    ref = to_utc_timestamp(now)
    if ref is None:
        return 0
    entries = pd.to_datetime(df["date_of_entry"], errors="coerce", utc=True)
    cutoff = ref - pd.Timedelta(days=days)
    return int((entries >= cutoff).sum())


def recent_profiles(df: pd.DataFrame, limit: int = 5) -> List[Dict[str, Any]]:
    if df.empty:
        return []
    ordered = df
    if "created_at" in df.columns:
        created = pd.to_datetime(df["created_at"], errors="coerce", utc=True)
        ordered = df.assign(_created=created).sort_values("_created", ascending=False, kind="stable", na_position="last")
        ordered = ordered.drop(columns=["_created"])
    head = ordered.head(limit).astype(object)
    return head.where(head.notna(), None).to_dict(orient="records")


def compute_dashboard(records: Sequence[Dict[str, Any]], *, now: Optional[datetime] = None, recent_days: int = 30) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    df = pd.DataFrame(list(records))

    genders = gender_counts(df)
    location_counts = value_counts_in_order(df, "current_location")
    occupation_counts = value_counts_in_order(df, "current_occupation")

    charts: Dict[str, Any] = {"gender": to_vega_spec(gender_chart(genders))}
    if not location_counts.empty:
        charts["top_locations"] = to_vega_spec(top_values_chart(location_counts.head(10), "current_location", "Current Location"))

    return {
        "total": int(len(df)),
        "gender": genders,
        "top_location": top_value(df, "current_location") or "N/A",
        "top_occupation": top_value(df, "current_occupation") or "N/A",
        "recent_entries": recent_entry_count(df, now, recent_days),
        "recent_days": int(recent_days),
        "recent_profiles": recent_profiles(df),
        "location_counts": location_counts.head(10).to_dict(orient="records"),
        "occupation_counts": occupation_counts.head(10).to_dict(orient="records"),
        "charts": charts,
    }
