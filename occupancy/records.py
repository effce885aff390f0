from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple

import pandas as pd

logger = logging.getLogger(__name__)

UNKNOWN_COMPANY = "Unknown Company"
DISPLAY_NAME_DEFAULT = "—"

# Canonical field -> accepted source keys, first non-empty wins.
RECORD_FIELDS: Mapping[str, Tuple[str, ...]] = {
    "company": ("companyName", "company_name", "company"),
    "zone": ("zone", "zoneName", "zone_name"),
    "display_name": ("name", "employeeName", "employee_name"),
    "employee_id": ("employeeId", "employee_id", "empId"),
    "card_number": ("cardNo", "cardNumber", "card_number", "card_no"),
    "personnel_type": ("personnelType", "personnel_type"),
    "primary_location": ("primaryLocation", "primary_location"),
}

_NA_TOKENS = {"nan", "<na>", "nat"}


def clean_text(value: object) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        try:
            if pd.isna(value):
                return None
        except (TypeError, ValueError):
            pass
    s = str(value).strip()
    if not s or s.lower() in _NA_TOKENS:
        return None
    return s


def _first_present(raw: Mapping[str, Any], keys: Iterable[str]) -> Optional[str]:
    for key in keys:
        value = clean_text(raw.get(key))
        if value is not None:
            return value
    return None


@dataclass(frozen=True)
class EmployeeRecord:
    """Typed view over one caller-supplied record.

    ``source`` keeps a reference to the caller's original mapping (not a
    copy), so fields this model does not name stay reachable from members.
    """

    company: str = UNKNOWN_COMPANY
    zone: Optional[str] = None
    display_name: Optional[str] = None
    employee_id: Optional[str] = None
    card_number: Optional[str] = None
    personnel_type: Optional[str] = None
    primary_location: Optional[str] = None
    source: Optional[Mapping[str, Any]] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "EmployeeRecord":
        values = {name: _first_present(raw, keys) for name, keys in RECORD_FIELDS.items()}
        company = values.pop("company") or UNKNOWN_COMPANY
        return cls(company=company, source=raw, **values)

    @property
    def shown_name(self) -> str:
        return self.display_name or DISPLAY_NAME_DEFAULT


def iter_records(details_data: object) -> Iterator[EmployeeRecord]:
    """Flatten a ``detailsData`` mapping (zone-group key -> list of records).

    Group keys are ignored; only the flattened order is kept. Group values
    that are not lists and records that are not mappings are skipped.
    """
    if isinstance(details_data, Mapping):
        groups: Iterable[object] = details_data.values()
    elif isinstance(details_data, (list, tuple)):
        groups = [details_data]
    else:
        return
    for group in groups:
        if not isinstance(group, (list, tuple)):
            logger.debug("skipping non-list zone group of type %s", type(group).__name__)
            continue
        for raw in group:
            if isinstance(raw, EmployeeRecord):
                yield raw
            elif isinstance(raw, Mapping):
                yield EmployeeRecord.from_raw(raw)
