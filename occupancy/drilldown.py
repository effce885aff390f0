from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple

import pandas as pd

from occupancy.records import EmployeeRecord
from occupancy.zones import normalize_zone

if TYPE_CHECKING:
    from occupancy.aggregate import CompanyAggregate, OverallAggregate

ROW_COLUMNS = {
    "seq": "#",
    "company": "Company",
    "name": "Name",
    "employee_id": "Employee ID",
    "card_number": "Card No.",
    "personnel_type": "Personnel Type",
    "primary_location": "Primary Location",
    "zone": "Zone",
}


@dataclass(frozen=True)
class DrilldownRow:
    seq: int
    name: str
    employee_id: Optional[str] = None
    card_number: Optional[str] = None
    personnel_type: Optional[str] = None
    primary_location: Optional[str] = None
    zone: Optional[str] = None
    company: Optional[str] = None

    @classmethod
    def from_record(cls, seq: int, record: EmployeeRecord, *, company: Optional[str] = None) -> "DrilldownRow":
        return cls(
            seq=seq,
            name=record.shown_name,
            employee_id=record.employee_id,
            card_number=record.card_number,
            personnel_type=record.personnel_type,
            primary_location=record.primary_location,
            zone=record.zone,
            company=company,
        )


@dataclass(frozen=True)
class DrilldownView:
    title: str
    rows: Tuple[DrilldownRow, ...] = ()

    def __len__(self) -> int:
        return len(self.rows)

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "rows": [asdict(r) for r in self.rows]}

    def to_frame(self) -> pd.DataFrame:
        """Rows as a display-ready DataFrame; the company column only when rows carry one."""
        cols = [c for c in ROW_COLUMNS if c != "company" or any(r.company for r in self.rows)]
        if not self.rows:
            return pd.DataFrame(columns=[ROW_COLUMNS[c] for c in cols])
        df = pd.DataFrame([asdict(r) for r in self.rows])[cols]
        return df.rename(columns=ROW_COLUMNS)


def _numbered(records: Iterable[EmployeeRecord]) -> Tuple[DrilldownRow, ...]:
    return tuple(DrilldownRow.from_record(i, r) for i, r in enumerate(records, start=1))


def project_company(company: "CompanyAggregate") -> Tuple[DrilldownRow, ...]:
    return _numbered(company.members)


def project_company_building(company: "CompanyAggregate", building: str) -> Tuple[DrilldownRow, ...]:
    return _numbered(r for r in company.members if normalize_zone(r.zone) == building)


def project_building(overall: "OverallAggregate", building: str) -> Tuple[DrilldownRow, ...]:
    """Every member in ``building`` across companies, sorted by (company, name) and renumbered."""
    matches: List[Tuple[str, EmployeeRecord]] = [
        (c.name, r) for c in overall.companies for r in c.members if normalize_zone(r.zone) == building
    ]
    matches.sort(key=lambda m: (m[0], m[1].shown_name))
    return tuple(DrilldownRow.from_record(i, r, company=name) for i, (name, r) in enumerate(matches, start=1))


def company_view(company: "CompanyAggregate", title: Optional[str] = None) -> DrilldownView:
    return DrilldownView(title=title or company.name, rows=project_company(company))


def building_view(overall: "OverallAggregate", building: str, title: Optional[str] = None) -> DrilldownView:
    return DrilldownView(title=title or building, rows=project_building(overall, building))


def company_building_view(company: "CompanyAggregate", building: str, title: Optional[str] = None) -> DrilldownView:
    return DrilldownView(
        title=title or f"{company.name} - {building}",
        rows=project_company_building(company, building),
    )
