from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class OccupancyFiltersModel(BaseModel):
    building: str = "all"
    company: Optional[str] = None
    search: str = ""
    top_n: int = 50


class RosterModel(BaseModel):
    details_data: Dict[str, Any] = Field(default_factory=dict, alias="detailsData")
    version: Optional[str] = None
    personnel_breakdown: List[Any] = Field(default_factory=list, alias="personnelBreakdown")
    zone_breakdown: List[Any] = Field(default_factory=list, alias="zoneBreakdown")
    floor_breakdown: List[Any] = Field(default_factory=list, alias="floorBreakdown")

    model_config = {"populate_by_name": True}

    def roster_ctx(self) -> Dict[str, Any]:
        return {
            "details_data": self.details_data,
            "version": self.version,
            "breakdowns": {
                "personnel": self.personnel_breakdown,
                "zone": self.zone_breakdown,
                "floor": self.floor_breakdown,
            },
        }


class OccupancyRequest(RosterModel):
    filters: OccupancyFiltersModel = Field(default_factory=OccupancyFiltersModel)


class DrilldownRequest(RosterModel):
    company: Optional[str] = None
    building: Optional[str] = None
    title: Optional[str] = None


class MetaBuildingsResponse(BaseModel):
    buildings: List[str]
    options: List[str]
