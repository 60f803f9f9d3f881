"""Split planning: group inventory entries into size-bounded plans.

The packer is a greedy two-pointer sweep over an inventory sorted largest
first. Plans are filled front to back with the largest entries that still
fit; once the next large entry overflows, the remaining headroom is topped
off ("backfilled") with the smallest entries from the tail before the plan
is closed and the overflowing entry seeds the next one. Skewed archives (a
handful of large blobs, many small files) end up in few plans this way. It is
not an optimal bin packing and makes no attempt to be.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Sequence

from .index import Entry

__all__ = [
    "Plan",
    "plan_split",
    "build_routing_table",
    "to_plan_dict",
]


@dataclass(slots=True)
class Plan:
    entries: List[Entry] = field(default_factory=list)
    total_size: int = 0

    def add(self, entry: Entry) -> None:
        self.entries.append(entry)
        self.total_size += entry.size

    @property
    def names(self) -> List[str]:
        return [e.name for e in self.entries]

    def exceeds(self, target_size: int) -> bool:
        return self.total_size > target_size


def plan_split(inventory: Sequence[Entry], target_size: int) -> List[Plan]:
    """Partition ``inventory`` (sorted by size, descending) into plans.

    Every entry lands in exactly one plan. A plan stays within
    ``target_size`` unless it was seeded with a single entry that is larger
    than the target on its own; such an entry always ends up alone in its
    plan.
    """
    if target_size <= 0:
        raise ValueError(f"target size must be positive, got {target_size}")

    plans: List[Plan] = []
    current = Plan()
    lo, hi = 0, len(inventory) - 1

    def close(plan: Plan) -> None:
        if plan.entries:
            plans.append(plan)

    while lo <= hi:
        entry = inventory[lo]
        if current.total_size + entry.size <= target_size:
            current.add(entry)
            lo += 1
            continue
        # Top off with the smallest unassigned entries. Strict comparison:
        # backfill never fills a plan to exactly the target.
        while hi >= lo:
            tail = inventory[hi]
            if current.total_size + tail.size < target_size:
                current.add(tail)
                hi -= 1
            else:
                break
        close(current)
        current = Plan()
        current.add(entry)
        lo += 1
    close(current)
    return plans


def build_routing_table(plans: Sequence[Plan]) -> Mapping[str, int]:
    """Read-only ``entry name -> plan index`` map.

    A name occurring more than once in the archive keeps the index of the
    first plan it was assigned to, so every copy is routed to one archive.
    """
    table: Dict[str, int] = {}
    for index, plan in enumerate(plans):
        for entry in plan.entries:
            table.setdefault(entry.name, index)
    return MappingProxyType(table)


def to_plan_dict(plans: Sequence[Plan], target_size: int) -> Dict[str, Any]:
    """JSON-serialisable view of a plan set."""

    def plan(index: int, p: Plan) -> Dict[str, Any]:
        return {
            "index": index,
            "total_size": p.total_size,
            "entry_count": len(p.entries),
            "oversized": p.exceeds(target_size),
            "entries": [
                {"name": e.name, "size": e.size, "kind": e.kind.value}
                for e in p.entries
            ],
        }

    totals = [p.total_size for p in plans]
    return {
        "target_size": target_size,
        "plans": [plan(i, p) for i, p in enumerate(plans)],
        "statistics": {
            "plan_count": len(plans),
            "entry_count": sum(len(p.entries) for p in plans),
            "total_size": sum(totals),
            "largest_plan": max(totals, default=0),
            "oversized_plans": sum(1 for p in plans if p.exceeds(target_size)),
        },
    }
