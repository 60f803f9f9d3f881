"""Archive splitter: re-stream the source into one archive per plan.

The splitter consumes the immutable plan set produced by the planner. Before
the pass it derives a read-only routing table (entry name -> plan index) and
opens every destination; the pass itself is a lookup-and-copy loop over the
source headers. Regular files are re-emitted with their original header
fields and payload bytes, streamed in chunks. Every other entry kind is
skipped.

Resource handling: all destinations and the source live in one
``ExitStack``. On success each destination is finalised with the
end-of-archive blocks; on any failure the already opened destinations are
closed without finalisation before the error propagates, and their contents
are not usable.
"""

from __future__ import annotations

import tarfile
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, List, Mapping, Sequence

from ..logging import get_logger, section
from ..reporting import TaskStatus, get_reporter
from .constants import COPY_BUFSIZE, OUTPUT_FORMAT
from .errors import read_error, routing_error, write_error
from .planner import Plan, build_routing_table
from .source import (
    DECODE_ERRORS,
    EntryKind,
    classify,
    detect_compression,
    iter_members,
    open_source,
)

__all__ = ["WrittenArchive", "SplitStats", "split_archive"]

DestinationNamer = Callable[[int], Path]


@dataclass(slots=True)
class WrittenArchive:
    index: int
    path: Path
    entries: int = 0
    bytes: int = 0


@dataclass(slots=True)
class SplitStats:
    archives: List[WrittenArchive]
    skipped: int = 0

    @property
    def entries(self) -> int:
        return sum(a.entries for a in self.archives)

    @property
    def bytes(self) -> int:
        return sum(a.bytes for a in self.archives)


class _PayloadReader:
    """File-like view over one member's payload.

    Source-side failures are raised as ``ReadError`` here, before tarfile's
    copy loop can report them as an ``OSError`` indistinguishable from a
    failing destination.
    """

    def __init__(self, raw: BinaryIO, member: tarfile.TarInfo, source: Path):
        self._raw = raw
        self._member = member
        self._source = source
        self._remaining = member.size

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            size = self._remaining
        try:
            chunk = self._raw.read(size)
        except DECODE_ERRORS as exc:
            raise read_error(
                f"cannot read payload: {exc}",
                entry=self._member.name,
                path=str(self._source),
                operation="read-payload",
            ) from exc
        if len(chunk) < min(size, self._remaining):
            raise read_error(
                "payload truncated",
                entry=self._member.name,
                path=str(self._source),
                operation="read-payload",
                expected=self._remaining,
                got=len(chunk),
            )
        self._remaining -= len(chunk)
        return chunk


def _finalise_guard(path: Path):
    """Exit callback that types an ``OSError`` raised while closing the
    destination at ``path``."""

    def guard(exc_type, exc, tb) -> bool:
        if isinstance(exc, OSError):
            raise write_error(
                f"cannot finalise destination archive: {exc}",
                path=str(path),
                operation="finalise",
            ) from exc
        return False

    return guard


def _open_destination(
    stack: ExitStack, path: Path, comptype: str
) -> tarfile.TarFile:
    stack.push(_finalise_guard(path))
    raw = stack.enter_context(path.open("wb"))
    archive = tarfile.open(
        fileobj=raw,
        mode=f"w|{comptype}",
        format=OUTPUT_FORMAT,
        copybufsize=COPY_BUFSIZE,
    )
    return stack.enter_context(archive)


def split_archive(
    source: str | Path,
    plans: Sequence[Plan],
    destination: DestinationNamer,
) -> SplitStats:
    """Copy every regular file of ``source`` into the archive of its plan.

    ``destination`` maps a plan index to the output path. Destinations use
    the source's compression. Raises ``WriteError``, ``ReadError`` or
    ``RoutingError``; see the module docstring for what is left on disk.
    """
    logger = get_logger()
    rep = get_reporter()
    src = Path(source)
    routes = build_routing_table(plans)
    comptype = detect_compression(src)
    written = [
        WrittenArchive(index=i, path=destination(i)) for i in range(len(plans))
    ]
    stats = SplitStats(archives=written)
    regular = [e for p in plans for e in p.entries if e.is_regular]
    planned_bytes = sum(e.size for e in regular)

    with section(f"Split {src.name} into {len(plans)} archive(s)"):
        rep.start_task(
            "split.write", "Copy entries", total=planned_bytes, unit="bytes"
        )
        try:
            with ExitStack() as stack:
                archive = stack.enter_context(open_source(src))
                writers = [
                    _create(stack, out.path, comptype) for out in written
                ]
                _copy_entries(archive, src, routes, writers, stats)
                if stats.entries != len(regular):
                    raise routing_error(
                        "source changed between passes",
                        path=str(src),
                        operation="verify",
                        planned=len(regular),
                        copied=stats.entries,
                    )
        except Exception:
            rep.end_task("split.write", TaskStatus.FAILED)
            raise
    rep.end_task(
        "split.write",
        entries=stats.entries,
        plans=len(plans),
        bytes=stats.bytes,
        skipped=stats.skipped,
    )
    logger.info(
        "Copied %d entries (%d bytes) into %d archive(s), skipped %d",
        stats.entries,
        stats.bytes,
        len(written),
        stats.skipped,
    )
    return stats


def _create(stack: ExitStack, path: Path, comptype: str) -> tarfile.TarFile:
    try:
        archive = _open_destination(stack, path, comptype)
    except OSError as exc:
        raise write_error(
            f"cannot create destination archive: {exc.strerror or exc}",
            path=str(path),
            operation="create",
        ) from exc
    get_logger().debug("Opened destination %s", path)
    return archive


def _copy_entries(
    archive: tarfile.TarFile | None,
    src: Path,
    routes: Mapping[str, int],
    writers: Sequence[tarfile.TarFile],
    stats: SplitStats,
) -> None:
    logger = get_logger()
    rep = get_reporter()
    for member in iter_members(archive, src):
        kind = classify(member)
        if kind is not EntryKind.REGULAR_FILE:
            stats.skipped += 1
            logger.debug("Skipping %s entry %s", kind.value, member.name)
            continue
        index = routes.get(member.name)
        if index is None:
            raise routing_error(
                "entry has no plan assignment",
                entry=member.name,
                path=str(src),
                operation="route",
            )
        out = stats.archives[index]
        payload = _PayloadReader(archive.extractfile(member), member, src)
        try:
            writers[index].addfile(member, payload)
        except OSError as exc:
            raise write_error(
                f"cannot write entry: {exc}",
                entry=member.name,
                path=str(out.path),
                operation="write",
            ) from exc
        out.entries += 1
        out.bytes += member.size
        rep.advance("split.write", member.size, current_item=member.name)
