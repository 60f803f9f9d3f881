"""Opening source archives for streaming reads.

Both the index pass and the rewrite pass go through :func:`open_source`, so a
compressed source is decompressed the same way each time and the members
handed out always come from the decompressed stream.
"""

from __future__ import annotations

import lzma
import os
import tarfile
import zlib
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Iterator

from .constants import COMPRESSION_SUFFIXES, REGULAR_TYPES
from .errors import open_error, read_error

__all__ = [
    "EntryKind",
    "DECODE_ERRORS",
    "classify",
    "detect_compression",
    "open_source",
    "iter_members",
]

# Everything a corrupt, truncated or mis-compressed stream can raise.
DECODE_ERRORS = (
    tarfile.TarError,
    EOFError,
    OSError,
    zlib.error,
    lzma.LZMAError,
)


class EntryKind(str, Enum):
    REGULAR_FILE = "regular-file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"


def classify(member: tarfile.TarInfo) -> EntryKind:
    if member.type in REGULAR_TYPES:
        return EntryKind.REGULAR_FILE
    if member.isdir():
        return EntryKind.DIRECTORY
    if member.issym():
        return EntryKind.SYMLINK
    return EntryKind.OTHER


def detect_compression(path: str | Path) -> str:
    """Return the tarfile compression name for ``path`` ("" when plain)."""
    name = Path(path).name.lower()
    for suffix, comptype in COMPRESSION_SUFFIXES:
        if name.endswith(suffix):
            return comptype
    return ""


@contextmanager
def open_source(path: str | Path) -> Iterator[tarfile.TarFile | None]:
    """Open ``path`` as a forward-only tar stream.

    A zero-length uncompressed file is an archive without entries and yields
    ``None``. Raises ``OpenError`` when the file cannot be opened and
    ``ReadError`` when the first header (or the compression wrapper) is
    unreadable.
    """
    p = Path(path)
    comptype = detect_compression(p)
    try:
        raw = p.open("rb")
    except OSError as exc:
        raise open_error(
            f"cannot open source archive: {exc.strerror or exc}",
            path=str(p),
            operation="open",
        ) from exc
    with raw:
        if not comptype and os.fstat(raw.fileno()).st_size == 0:
            yield None
            return
        try:
            archive = tarfile.open(fileobj=raw, mode=f"r|{comptype}")
        except DECODE_ERRORS as exc:
            raise read_error(
                f"unreadable archive: {exc}", path=str(p), operation="open"
            ) from exc
        with archive:
            yield archive


def iter_members(
    archive: tarfile.TarFile | None, path: str | Path
) -> Iterator[tarfile.TarInfo]:
    """Yield headers until the end-of-archive marker.

    Advancing skips whatever payload of the previous member was not read, so
    a payload cut short surfaces here as ``ReadError``.
    """
    if archive is None:
        return
    while True:
        try:
            member = archive.next()
        except DECODE_ERRORS as exc:
            raise read_error(
                f"malformed or truncated archive: {exc}",
                path=str(path),
                operation="read-header",
            ) from exc
        if member is None:
            return
        yield member
