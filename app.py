import altair as alt
import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import List, Optional

from occupancy.charts import company_stack_chart
from occupancy.data import load_roster_data, prepare_context
from occupancy.drilldown import DrilldownView
from occupancy.filters import ALL_BUILDINGS, BUILDING_OPTIONS, search_companies
from occupancy.metrics_occupancy import companies_frame, compute_drilldown
from occupancy.ranking import PodiumEntry
from occupancy.zones import BUILDINGS, PODIUM_FLOOR

alt.data_transformers.disable_max_rows()
# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .app-top-bar {padding: 6px 0 4px;border-bottom: 1px solid #e5e7eb;margin-bottom: 10px;}
        .app-top-bar .breadcrumb {color: #6b7280;font-size: 0.9rem;margin-bottom: 2px;}
        .app-top-bar .page-title {font-size: 1.4rem;font-weight: 700;color: #111827;}
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;margin-bottom: 8px;}
        .podium {text-align: center;border-radius: 12px;padding: 12px;background: #f9fafb;border: 1px solid #e5e7eb;}
        .podium .label {font-size: 0.85rem;color: #6b7280;}
        .podium .name {font-size: 1.1rem;font-weight: 700;color: #111827;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(f"<div class='card'><div class='card-title'>{title}</div>", unsafe_allow_html=True)
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(building: str, search: str, files: List[str]) -> str:
    chips = [
        "Building: All" if building == ALL_BUILDINGS else f"Building: {building}",
        f"Company search: {search}" if search else "Company: All",
        f"Files: {len(files)}",
    ]
    return "".join([f"<span class='chip'>{txt}</span>" for txt in chips])


def render_page_header(title: str, breadcrumb: str, filter_summary_html: str, export_df: Optional[pd.DataFrame] = None, export_name: str = "export.csv"):
    inject_base_styles()
    c1, c2 = st.columns([8, 2])
    with c1:
        st.markdown(
            f"<div class='app-top-bar'><div class='breadcrumb'>{breadcrumb}</div><div class='page-title'>{title}</div></div>",
            unsafe_allow_html=True,
        )
    with c2:
        if export_df is not None and not export_df.empty:
            st.download_button(
                "Export CSV",
                data=export_df.to_csv(index=False).encode("utf-8"),
                file_name=export_name,
                mime="text/csv",
            )
    st.markdown(f"<div class='chip-row'>{filter_summary_html}</div>", unsafe_allow_html=True)


def render_kpi_tiles(overall):
    cols = st.columns(len(BUILDINGS) + 1)
    cols[0].metric("Total employees", f"{overall.total:,}")
    for col, building in zip(cols[1:], BUILDINGS):
        col.metric(building, f"{overall.by_building[building]:,}")
    if overall.excluded:
        st.caption(f"{overall.excluded:,} records in unrecognised zones are not counted.")


def render_podium(podium: List[PodiumEntry]):
    if not podium:
        st.info(f"No companies on the {PODIUM_FLOOR} yet.")
        return
    cols = st.columns(3)
    for col, entry in zip(cols, podium):
        col.markdown(
            f"<div class='podium'><div class='label'>{entry.label}</div>"
            f"<div class='name'>{entry.name}</div><div>{entry.count:,} on {PODIUM_FLOOR}</div></div>",
            unsafe_allow_html=True,
        )


def render_drilldown(view: DrilldownView):
    if not len(view):
        st.info("No employees match this selection.")
        return
    frame = view.to_frame()
    st.dataframe(frame, hide_index=True, use_container_width=True)
    st.download_button(
        "Download rows",
        data=frame.to_csv(index=False).encode("utf-8"),
        file_name=f"{view.title}.csv",
        mime="text/csv",
    )


# ---------- UI setup ----------
st.set_page_config(page_title="Building Occupancy", layout="wide")
inject_base_styles()
st.title("Building Occupancy by Company")
st.caption("Employees on site per company across the Podium Floor, 2nd Floor and Tower B.")

roster_ctx = load_roster_data()
files = roster_ctx.get("files", [])
if not files:
    st.error("No roster files found. Place occupancy*.json / occupancy*.xlsx files next to app.py.")
    st.stop()

with st.sidebar:
    st.markdown("### Filters")
    building = st.radio(
        "Building",
        BUILDING_OPTIONS,
        index=0,
        format_func=lambda b: "All buildings" if b == ALL_BUILDINGS else b,
    )
    search = st.text_input("Company search (optional)", "")
    top_n = st.slider("Companies in chart", min_value=5, max_value=50, value=15, step=5)

ctx = prepare_context({"building": building, "search": search, "top_n": top_n}, roster_ctx)
overall = ctx["overall"]
filters = ctx["filters"]
companies = search_companies(ctx["filtered_companies"], filters.search)
company_table = companies_frame(companies)

render_page_header(
    "Occupancy Overview",
    "Home / Occupancy",
    format_filter_summary(filters.building, filters.search, files),
    export_df=company_table,
    export_name="companies.csv",
)

with card("Totals"):
    render_kpi_tiles(overall)

with card(f"{PODIUM_FLOOR} Podium"):
    render_podium(list(ctx["podium"]))

table_cols = st.columns([3, 2])
with table_cols[0]:
    with card("Companies"):
        if company_table.empty:
            st.info("No companies for this selection.")
        else:
            st.dataframe(company_table, hide_index=True, use_container_width=True)
with table_cols[1]:
    with card("Headcount by building"):
        if companies:
            st.altair_chart(company_stack_chart(companies, top_n=filters.top_n), use_container_width=True)
        else:
            st.info("Not enough data for a chart.")

with card("Drill-down"):
    names = [c.name for c in companies]
    d1, d2 = st.columns(2)
    drill_company = d1.selectbox("Company", ["(any)"] + names)
    drill_building = d2.selectbox("Building", ["(any)"] + list(BUILDINGS))
    company_arg = None if drill_company == "(any)" else drill_company
    building_arg = None if drill_building == "(any)" else drill_building
    if company_arg is None and building_arg is None:
        st.caption("Pick a company, a building, or both to list employees.")
    else:
        render_drilldown(compute_drilldown(ctx, company=company_arg, building=building_arg))

for label, rows in (ctx.get("breakdowns") or {}).items():
    if rows:
        with st.expander(f"{label.title()} breakdown"):
            st.dataframe(pd.DataFrame(rows), hide_index=True)
