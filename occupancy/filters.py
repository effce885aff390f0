from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Mapping, Optional, Tuple

from occupancy.zones import BUILDINGS

if TYPE_CHECKING:
    from occupancy.aggregate import CompanyAggregate, OverallAggregate

ALL_BUILDINGS = "all"
BUILDING_OPTIONS: Tuple[str, ...] = (ALL_BUILDINGS,) + BUILDINGS


@dataclass(frozen=True)
class OccupancyFilters:
    building: str = ALL_BUILDINGS
    company: Optional[str] = None
    search: str = ""
    top_n: int = 50


def _normalize_building(value: object) -> str:
    if value is None:
        return ALL_BUILDINGS
    s = str(value).strip()
    for option in BUILDING_OPTIONS:
        if s.lower() == option.lower():
            return option
    return ALL_BUILDINGS


def normalize_filters(raw: Optional[Mapping], *, available_companies: Optional[Iterable[str]] = None) -> OccupancyFilters:
    if not isinstance(raw, Mapping):
        raw = {}
    building = _normalize_building(raw.get("building"))

    company = (str(raw.get("company") or "")).strip() or None
    if company is not None and available_companies is not None and company not in set(available_companies):
        company = None

    search = str(raw.get("search") or "").strip()

    top_n = raw.get("top_n", 50)
    try:
        top_n = int(top_n)
    except Exception:
        top_n = 50
    top_n = max(1, min(500, top_n))

    return OccupancyFilters(building=building, company=company, search=search, top_n=top_n)


def filter_companies(overall: "OverallAggregate", building: str) -> Tuple["CompanyAggregate", ...]:
    """Companies present in ``building``, in ranked order; "all" returns every company."""
    if building == ALL_BUILDINGS:
        return overall.companies
    return tuple(c for c in overall.companies if c.count_for(building) > 0)


def search_companies(companies: Iterable["CompanyAggregate"], query: str) -> List["CompanyAggregate"]:
    q = (query or "").strip().lower()
    if not q:
        return list(companies)
    return [c for c in companies if q in c.name.lower()]
