from __future__ import annotations

from typing import Optional, Tuple

PODIUM_FLOOR = "Podium Floor"
SECOND_FLOOR = "2nd Floor"
TOWER_B = "Tower B"

BUILDINGS: Tuple[str, ...] = (PODIUM_FLOOR, SECOND_FLOOR, TOWER_B)
NO_BUILDING = "none"

# Order matters: a zone matching several rules lands in the first one.
ZONE_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("red zone", "yellow zone", "green zone", "reception"), PODIUM_FLOOR),
    (("2nd",), SECOND_FLOOR),
    (("tower b",), TOWER_B),
)


def normalize_zone(zone: Optional[object]) -> str:
    """Map a raw zone tag to a building name, or ``NO_BUILDING``."""
    if zone is None:
        return NO_BUILDING
    text = str(zone).lower()
    if not text:
        return NO_BUILDING
    for needles, building in ZONE_RULES:
        if any(n in text for n in needles):
            return building
    return NO_BUILDING


def empty_building_counts() -> dict:
    return {b: 0 for b in BUILDINGS}
