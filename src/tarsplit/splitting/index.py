"""Archive index reader: entry inventory without touching payloads."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List

from ..logging import get_logger
from .source import EntryKind, classify, iter_members, open_source

__all__ = ["Entry", "EntryKind", "scan_archive", "sort_inventory", "build_inventory"]


@dataclass(frozen=True, slots=True)
class Entry:
    name: str
    size: int
    kind: EntryKind = EntryKind.REGULAR_FILE

    @property
    def is_regular(self) -> bool:
        return self.kind is EntryKind.REGULAR_FILE


def scan_archive(path: str | Path) -> Iterator[Entry]:
    """Lazily yield one :class:`Entry` per header, in archive order."""
    with open_source(path) as archive:
        for member in iter_members(archive, path):
            yield Entry(member.name, member.size, classify(member))


def sort_inventory(entries: Iterable[Entry]) -> List[Entry]:
    # sorted() is stable, equal sizes keep archive order.
    return sorted(entries, key=lambda e: e.size, reverse=True)


def build_inventory(path: str | Path) -> List[Entry]:
    """Scan ``path`` and return its entries sorted by size, largest first."""
    logger = get_logger()
    entries = list(scan_archive(path))
    logger.info("Indexed %d entries from %s", len(entries), Path(path).name)
    return sort_inventory(entries)
