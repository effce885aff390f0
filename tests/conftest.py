"""Shared pytest fixtures for occupancy tests."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest


def make_record(company: str | None, zone: str | None, name: str | None = None, **extra: Any) -> Dict[str, Any]:
    record: Dict[str, Any] = {}
    if company is not None:
        record["companyName"] = company
    if zone is not None:
        record["zone"] = zone
    if name is not None:
        record["name"] = name
    record.update(extra)
    return record


@pytest.fixture
def details_data() -> Dict[str, List[Dict[str, Any]]]:
    """A small roster spread over all three buildings plus one unmapped zone."""
    return {
        "red": [
            make_record("Acme", "Red Zone A", "Zoe", employeeId="E1", cardNo="C1", personnelType="Staff", primaryLocation="HQ"),
            make_record("Globex", "Red Zone B", "Bob", employeeId="E2", primaryLocation="Annex"),
            make_record("Acme", "Reception", "Amy", employeeId="E3", primaryLocation="HQ"),
        ],
        "second": [
            make_record("Globex", "2nd Floor East", "Carl", employeeId="E4"),
            make_record("Initech", "2nd floor west", None, employeeId="E5", primaryLocation="Remote"),
        ],
        "tower": [
            make_record("Acme", "Tower B Lobby", "Ann", employeeId="E6", primaryLocation="Satellite"),
            make_record(None, "TOWER B L3", "Uma", employeeId="E7"),
        ],
        "other": [
            make_record("Acme", "Unmapped Wing", "Ghost", employeeId="E8"),
        ],
    }
