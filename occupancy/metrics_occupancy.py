from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Iterable, Optional

import pandas as pd

from occupancy.aggregate import CompanyAggregate
from occupancy.charts import company_stack_chart, to_vega_spec
from occupancy.drilldown import DrilldownView, building_view, company_building_view, company_view
from occupancy.filters import OccupancyFilters, search_companies
from occupancy.zones import BUILDINGS


def compute_occupancy(filters: OccupancyFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    overall = ctx["overall"]
    companies = search_companies(ctx.get("filtered_companies", ()), filters.search)
    shown = companies[: filters.top_n]

    selected = ctx.get("selected_company")
    ranks = {c.name: i for i, c in enumerate(overall.companies, start=1)}
    charts: Dict[str, Any] = {}
    if shown:
        charts["companies"] = to_vega_spec(company_stack_chart(shown, top_n=filters.top_n))

    return {
        "filters": asdict(filters),
        "totals": {"total": overall.total, "by_building": dict(overall.by_building), "excluded": overall.excluded},
        "buildings": list(BUILDINGS),
        "companies": [
            {"rank": ranks[c.name], **c.to_dict()}
            for c in shown
        ],
        "company_count": len(companies),
        "podium": [p.to_dict() for p in ctx.get("podium", ())],
        "charts": charts,
        "selected_company": selected.to_dict(include_members=True) if selected is not None else None,
        "breakdowns": ctx.get("breakdowns") or {},
    }


def compute_drilldown(
    ctx: Dict[str, Any],
    *,
    company: Optional[str] = None,
    building: Optional[str] = None,
    title: Optional[str] = None,
) -> DrilldownView:
    """Resolve a drill-down request; unknown companies or buildings give an empty view."""
    overall = ctx["overall"]
    agg = overall.company(company) if company else None
    if company and building:
        if agg is None:
            return DrilldownView(title=title or f"{company} - {building}")
        return company_building_view(agg, building, title)
    if company:
        if agg is None:
            return DrilldownView(title=title or company)
        return company_view(agg, title)
    if building:
        return building_view(overall, building, title)
    return DrilldownView(title=title or "")


def companies_frame(companies: Iterable[CompanyAggregate]) -> pd.DataFrame:
    """Company table as shown on the dashboard, in the given order."""
    columns = ["Rank", "Company", "Total", *BUILDINGS, "Share %", "Locations"]
    rows = [
        [i, c.name, c.total, *(c.count_for(b) for b in BUILDINGS), c.percentage, ", ".join(c.sorted_locations())]
        for i, c in enumerate(companies, start=1)
    ]
    return pd.DataFrame(rows, columns=columns)
