from __future__ import annotations

from typing import Any, Dict, Iterable

import altair as alt
import pandas as pd

from occupancy.zones import BUILDINGS

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def company_building_frame(companies: Iterable[Any]) -> pd.DataFrame:
    """Long-form (company, building, count) rows, one per nonzero count."""
    rows = [
        {"company": c.name, "building": b, "count": c.count_for(b), "total": c.total}
        for c in companies
        for b in BUILDINGS
        if c.count_for(b)
    ]
    return pd.DataFrame(rows, columns=["company", "building", "count", "total"])


def company_stack_chart(companies: Iterable[Any], *, top_n: int = 15) -> alt.Chart:
    companies = list(companies)[:top_n]
    df = company_building_frame(companies)
    order = [c.name for c in companies]
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            y=alt.Y("company:N", sort=order, title=None),
            x=alt.X("count:Q", title="Employees", stack="zero"),
            color=alt.Color("building:N", title="Building", scale=alt.Scale(domain=list(BUILDINGS))),
            tooltip=["company", "building", alt.Tooltip("count:Q", format=","), alt.Tooltip("total:Q", format=",")],
        )
        .properties(height=max(120, 24 * len(order)))
    )
