from .errors import (
    SplitError,
    OpenError,
    ReadError,
    WriteError,
    RoutingError,
)
from .index import Entry, EntryKind, build_inventory, scan_archive
from .planner import Plan, build_routing_table, plan_split
from .writer import SplitStats, WrittenArchive, split_archive

__all__ = [
    "SplitError",
    "OpenError",
    "ReadError",
    "WriteError",
    "RoutingError",
    "Entry",
    "EntryKind",
    "build_inventory",
    "scan_archive",
    "Plan",
    "build_routing_table",
    "plan_split",
    "SplitStats",
    "WrittenArchive",
    "split_archive",
]
