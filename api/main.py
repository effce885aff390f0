from __future__ import annotations

import logging
from typing import Literal, Optional

from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import DrilldownRequest, MetaBuildingsResponse, OccupancyFiltersModel, OccupancyRequest
from occupancy.data import load_roster_data, prepare_context
from occupancy.filters import BUILDING_OPTIONS, OccupancyFilters, normalize_filters
from occupancy.metrics_occupancy import companies_frame, compute_drilldown, compute_occupancy
from occupancy.zones import BUILDINGS


app = FastAPI(title="Occupancy Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: OccupancyFiltersModel) -> OccupancyFilters:
    return normalize_filters(model.model_dump())


def _json(data: object) -> JSONResponse:
    return JSONResponse(content=jsonable_encoder(data, custom_encoder={frozenset: sorted, set: sorted}))


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.get("/meta/buildings", response_model=MetaBuildingsResponse)
def meta_buildings():
    return {"buildings": list(BUILDINGS), "options": list(BUILDING_OPTIONS)}


@app.post("/occupancy")
def occupancy(request: OccupancyRequest):
    try:
        f = _filters_from_model(request.filters)
        ctx = prepare_context(f, request.roster_ctx())
        return _json(compute_occupancy(f, ctx))
    except Exception as exc:
        logger.exception("occupancy failed")
        return _error(exc)


@app.get("/roster")
def roster(building: str = "all", search: str = "", top_n: int = 50):
    try:
        roster_ctx = load_roster_data()
        f = normalize_filters({"building": building, "search": search, "top_n": top_n})
        ctx = prepare_context(f, roster_ctx)
        payload = compute_occupancy(f, ctx)
        payload["files"] = ctx["files"]
        return _json(payload)
    except Exception as exc:
        logger.exception("roster failed")
        return _error(exc)


def _drilldown(request: DrilldownRequest, *, company: Optional[str], building: Optional[str]) -> JSONResponse:
    ctx = prepare_context({}, request.roster_ctx())
    view = compute_drilldown(ctx, company=company, building=building, title=request.title)
    return _json(view.to_dict())


@app.post("/drilldown/company")
def drilldown_company(request: DrilldownRequest):
    try:
        return _drilldown(request, company=request.company or "", building=None)
    except Exception as exc:
        logger.exception("drilldown_company failed")
        return _error(exc)


@app.post("/drilldown/building")
def drilldown_building(request: DrilldownRequest):
    try:
        return _drilldown(request, company=None, building=request.building or "")
    except Exception as exc:
        logger.exception("drilldown_building failed")
        return _error(exc)


@app.post("/drilldown/company-building")
def drilldown_company_building(request: DrilldownRequest):
    try:
        return _drilldown(request, company=request.company or "", building=request.building or "")
    except Exception as exc:
        logger.exception("drilldown_company_building failed")
        return _error(exc)


@app.post("/export/{view}")
def export_view(view: Literal["companies", "drilldown"], request: DrilldownRequest):
    f = normalize_filters({"building": request.building})
    ctx = prepare_context(f, request.roster_ctx())

    if view == "companies":
        frame = companies_frame(ctx["filtered_companies"])
        filename = "companies.csv"
    else:
        drill = compute_drilldown(ctx, company=request.company, building=request.building, title=request.title)
        frame = drill.to_frame()
        filename = "drilldown.csv"

    csv_bytes = frame.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
