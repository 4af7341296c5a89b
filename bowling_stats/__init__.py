"""Bowling league statistics engine."""

__all__ = [
    "config",
    "types",
    "store_client",
    "ingest",
    "normalize",
    "rolling",
    "date_groups",
    "records",
    "synergy",
    "inconsistency",
    "lanes",
    "comebacks",
    "overview",
    "cache",
    "report",
    "render",
]
