from __future__ import annotations

from typing import Any, Dict

import altair as alt
import pandas as pd

alt.data_transformers.disable_max_rows()

GENDER_COLORS = {"Male": "#0ea5e9", "Female": "#8b5cf6", "Other": "#9ca3af"}


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def gender_chart(gender_counts: Dict[str, int]) -> alt.Chart:
    df = pd.DataFrame({"gender": list(gender_counts.keys()), "count": [int(v) for v in gender_counts.values()]})
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("gender:N", title="Gender", sort=list(gender_counts.keys())),
            y=alt.Y("count:Q", title="Profiles", axis=alt.Axis(format="d", tickMinStep=1)),
            color=alt.Color(
                "gender:N",
                scale=alt.Scale(domain=list(GENDER_COLORS.keys()), range=list(GENDER_COLORS.values())),
                legend=None,
            ),
            tooltip=["gender", alt.Tooltip("count:Q", format=",")],
        )
        .properties(height=240)
    )


def top_values_chart(counts: pd.DataFrame, column: str, title: str) -> alt.Chart:
    return (
        alt.Chart(counts)
        .mark_bar()
        .encode(
            y=alt.Y(f"{column}:N", title=title, sort="-x"),
            x=alt.X("count:Q", title="Profiles", axis=alt.Axis(format="d", tickMinStep=1)),
            tooltip=[column, alt.Tooltip("count:Q", format=",")],
        )
        .properties(height=240)
    )
