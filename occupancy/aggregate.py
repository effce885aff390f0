from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Tuple

from occupancy.ranking import rank_companies
from occupancy.records import EmployeeRecord, iter_records
from occupancy.zones import BUILDINGS, NO_BUILDING, empty_building_counts, normalize_zone

logger = logging.getLogger(__name__)

ZERO_PERCENTAGE = "0.0"


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None:
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def format_percentage(count: int, overall_total: int) -> str:
    """Share of ``overall_total`` as a one-decimal string; "0.0" when the total is 0."""
    if not overall_total:
        return ZERO_PERCENTAGE
    return f"{round_half_up(count / overall_total * 100, 1):.1f}"


def _frozen_counts(counts: Mapping[str, int]) -> Mapping[str, int]:
    return MappingProxyType({b: int(counts.get(b, 0)) for b in BUILDINGS})


@dataclass(frozen=True)
class CompanyAggregate:
    name: str
    total: int
    by_building: Mapping[str, int]
    members: Tuple[EmployeeRecord, ...] = ()
    locations: FrozenSet[str] = frozenset()
    percentage: str = ZERO_PERCENTAGE

    def count_for(self, building: str) -> int:
        return int(self.by_building.get(building, 0))

    def sorted_locations(self) -> List[str]:
        return sorted(self.locations)

    def to_dict(self, *, include_members: bool = False) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "name": self.name,
            "total": self.total,
            "by_building": dict(self.by_building),
            "percentage": self.percentage,
            "locations": self.sorted_locations(),
        }
        if include_members:
            out["members"] = [
                {
                    "name": r.shown_name,
                    "employee_id": r.employee_id,
                    "card_number": r.card_number,
                    "personnel_type": r.personnel_type,
                    "primary_location": r.primary_location,
                    "zone": r.zone,
                }
                for r in self.members
            ]
        return out


@dataclass(frozen=True)
class OverallAggregate:
    total: int = 0
    by_building: Mapping[str, int] = field(default_factory=lambda: _frozen_counts({}))
    companies: Tuple[CompanyAggregate, ...] = ()
    excluded: int = 0

    def company(self, name: str) -> Optional[CompanyAggregate]:
        for c in self.companies:
            if c.name == name:
                return c
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "by_building": dict(self.by_building),
            "excluded": self.excluded,
            "companies": [c.to_dict() for c in self.companies],
        }


class _CompanyAccumulator:
    __slots__ = ("name", "total", "counts", "members", "locations")

    def __init__(self, name: str) -> None:
        self.name = name
        self.total = 0
        self.counts = empty_building_counts()
        self.members: List[EmployeeRecord] = []
        self.locations: set = set()

    def add(self, record: EmployeeRecord, building: str) -> None:
        self.total += 1
        self.counts[building] += 1
        self.members.append(record)
        if record.primary_location:
            self.locations.add(record.primary_location)

    def finalize(self, overall_total: int) -> CompanyAggregate:
        return CompanyAggregate(
            name=self.name,
            total=self.total,
            by_building=_frozen_counts(self.counts),
            members=tuple(self.members),
            locations=frozenset(self.locations),
            percentage=format_percentage(self.total, overall_total),
        )


def aggregate_occupancy(details_data: object) -> OverallAggregate:
    """Group every recognised record by company and building in one pass.

    Records whose zone maps to no building are left out of every count.
    Companies come back ranked by total, ties in encounter order.
    """
    working: Dict[str, _CompanyAccumulator] = {}
    overall_counts = empty_building_counts()
    overall_total = 0
    excluded = 0

    for record in iter_records(details_data):
        building = normalize_zone(record.zone)
        if building == NO_BUILDING:
            excluded += 1
            continue
        acc = working.get(record.company)
        if acc is None:
            acc = working[record.company] = _CompanyAccumulator(record.company)
        acc.add(record, building)
        overall_total += 1
        overall_counts[building] += 1

    companies = rank_companies([acc.finalize(overall_total) for acc in working.values()])
    logger.debug(
        "aggregated %d records into %d companies (%d excluded)", overall_total, len(companies), excluded
    )
    return OverallAggregate(
        total=overall_total,
        by_building=_frozen_counts(overall_counts),
        companies=tuple(companies),
        excluded=excluded,
    )
