"""Core (UI-agnostic) occupancy logic.

This package contains:
- zone normalization (raw zone string -> building)
- single-pass company/building aggregation and ranking
- building filters and drill-down row projections
- roster loading, aggregate caching and JSON-serializable page payloads
"""
