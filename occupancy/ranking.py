from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Tuple

from occupancy.zones import PODIUM_FLOOR

if TYPE_CHECKING:
    from occupancy.aggregate import CompanyAggregate

PODIUM_SIZE = 3
PODIUM_LABELS: Tuple[str, ...] = ("1st", "2nd", "3rd")


@dataclass(frozen=True)
class PodiumEntry:
    rank: int
    label: str
    name: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"rank": self.rank, "label": self.label, "name": self.name, "count": self.count}


def rank_companies(companies: Iterable["CompanyAggregate"]) -> List["CompanyAggregate"]:
    # sorted() is stable, so equal totals keep encounter order.
    return sorted(companies, key=lambda c: c.total, reverse=True)


def compute_podium(ranked: Iterable["CompanyAggregate"], building: str = PODIUM_FLOOR) -> Tuple[PodiumEntry, ...]:
    """Top three companies by their count on ``building`` (Podium Floor by default)."""
    qualified = [c for c in ranked if c.count_for(building) > 0]
    qualified = sorted(qualified, key=lambda c: c.count_for(building), reverse=True)
    return tuple(
        PodiumEntry(rank=i + 1, label=PODIUM_LABELS[i], name=c.name, count=c.count_for(building))
        for i, c in enumerate(qualified[:PODIUM_SIZE])
    )
