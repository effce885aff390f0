from __future__ import annotations

import json
import logging
import threading
from collections import OrderedDict
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Hashable, List, Mapping, Optional, Tuple

import pandas as pd

from occupancy.aggregate import OverallAggregate, aggregate_occupancy
from occupancy.filters import OccupancyFilters, filter_companies, normalize_filters
from occupancy.ranking import compute_podium
from occupancy.records import RECORD_FIELDS, clean_text

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1]
ROSTER_GLOBS: Tuple[str, ...] = ("occupancy*.json", "occupancy*.xlsx", "occupancy*.csv")
CACHE_SIZE = 4

BREAKDOWN_KEYS = {
    "personnelBreakdown": "personnel",
    "zoneBreakdown": "zone",
    "floorBreakdown": "floor",
}
UNGROUPED_ZONE_KEY = "(no zone)"


class AggregateCache:
    """Aggregates keyed by the identity of the raw collection and an optional version token.

    An entry is only reused for the very same object carrying the same
    version, so a new or replaced collection is always recomputed. Callers
    that mutate a collection in place must pass a new version. Safe to share
    between the API's worker threads.
    """

    def __init__(self, maxsize: int = CACHE_SIZE) -> None:
        self.maxsize = max(1, int(maxsize))
        self._entries: "OrderedDict[Tuple[int, Hashable], Tuple[object, OverallAggregate]]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, details_data: object, version: Optional[Hashable] = None) -> OverallAggregate:
        key = (id(details_data), version)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[0] is details_data:
                self._entries.move_to_end(key)
                self.hits += 1
                return entry[1]

            self.misses += 1
            overall = aggregate_occupancy(details_data)
            self._entries[key] = (details_data, overall)
            self._entries.move_to_end(key)
            while len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)
            return overall

    def invalidate(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


default_cache = AggregateCache()


def get_roster_files(data_dir: Optional[Path] = None) -> List[Path]:
    base = data_dir or DATA_DIR
    files = {f for pattern in ROSTER_GLOBS for f in base.glob(pattern)}
    return sorted(files)


def file_signature(files: List[Path]) -> Tuple[Tuple[str, float], ...]:
    return tuple((str(f), f.stat().st_mtime) for f in files)


def _zone_column(df: pd.DataFrame) -> Optional[str]:
    for col in RECORD_FIELDS["zone"]:
        if col in df.columns:
            return col
    return None


def group_table_by_zone(df: pd.DataFrame) -> Dict[str, List[Dict[str, Any]]]:
    """Turn a flat roster table into a ``detailsData`` mapping keyed by zone."""
    if df.empty:
        return {}
    df = df.loc[:, ~df.columns.duplicated()]
    zone_col = _zone_column(df)
    details: Dict[str, List[Dict[str, Any]]] = {}
    for row in df.to_dict(orient="records"):
        key = (clean_text(row.get(zone_col)) if zone_col else None) or UNGROUPED_ZONE_KEY
        details.setdefault(key, []).append(row)
    return details


def load_roster_file(path: Path) -> Dict[str, Any]:
    suffix = path.suffix.lower()
    if suffix == ".json":
        with path.open(encoding="utf-8") as fh:
            payload = json.load(fh)
        if isinstance(payload, Mapping) and "detailsData" in payload:
            details = payload.get("detailsData") or {}
            breakdowns = breakdowns_from_payload(payload)
        else:
            details = payload
            breakdowns = {}
        return {"details_data": details, "breakdowns": breakdowns}

    if suffix == ".xlsx":
        df = pd.read_excel(path, dtype=str)
    else:
        df = pd.read_csv(path, dtype=str)
    df.columns = [str(c).strip() for c in df.columns]
    return {"details_data": group_table_by_zone(df), "breakdowns": {}}


def merge_details(target: Dict[str, list], details: object) -> None:
    if isinstance(details, Mapping):
        for key, group in details.items():
            if isinstance(group, list):
                target.setdefault(str(key), []).extend(group)
    elif isinstance(details, list):
        target.setdefault(UNGROUPED_ZONE_KEY, []).extend(details)


@lru_cache(maxsize=CACHE_SIZE)
def _load_roster_cached(files_sig: Tuple[Tuple[str, float], ...]) -> Dict[str, object]:
    details: Dict[str, list] = {}
    breakdowns: Dict[str, list] = {name: [] for name in BREAKDOWN_KEYS.values()}
    for name, _ in files_sig:
        loaded = load_roster_file(Path(name))
        merge_details(details, loaded["details_data"])
        for key, rows in loaded["breakdowns"].items():
            if isinstance(rows, list):
                breakdowns[key].extend(rows)
    logger.debug("loaded roster from %d file(s), %d zone groups", len(files_sig), len(details))
    return {
        "files": [Path(name).name for name, _ in files_sig],
        "version": files_sig,
        "details_data": details,
        "breakdowns": breakdowns,
    }


def load_roster_data(data_dir: Optional[Path] = None) -> Dict[str, object]:
    files = get_roster_files(data_dir)
    if not files:
        return {"files": [], "version": None, "details_data": {}, "breakdowns": {}}
    return _load_roster_cached(file_signature(files))


def breakdowns_from_payload(payload: Optional[Mapping[str, Any]]) -> Dict[str, list]:
    """Pick the companion breakdown lists out of a caller payload, untouched."""
    payload = payload or {}
    out: Dict[str, list] = {}
    for key, name in BREAKDOWN_KEYS.items():
        value = payload.get(key, payload.get(name))
        out[name] = value if isinstance(value, list) else []
    return out


def prepare_context(
    filters: dict | OccupancyFilters,
    roster_ctx: Mapping[str, Any],
    *,
    cache: Optional[AggregateCache] = None,
) -> Dict[str, object]:
    cache = cache or default_cache
    details = roster_ctx.get("details_data") or {}
    overall = cache.get(details, roster_ctx.get("version"))

    if isinstance(filters, OccupancyFilters):
        f = filters
    else:
        f = normalize_filters(filters, available_companies=[c.name for c in overall.companies])

    return {
        "filters": f,
        "overall": overall,
        "filtered_companies": filter_companies(overall, f.building),
        "podium": compute_podium(overall.companies),
        "selected_company": overall.company(f.company) if f.company else None,
        "breakdowns": roster_ctx.get("breakdowns") or {},
        "files": roster_ctx.get("files") or [],
    }
