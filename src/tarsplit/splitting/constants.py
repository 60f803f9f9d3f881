"""Constants shared by the index reader, planner and splitter."""

from __future__ import annotations

import tarfile

# 5 GiB, the usual per-layer ceiling of container registries.
DEFAULT_TARGET_SIZE = 5 * 1024 * 1024 * 1024

# Suffix -> tarfile compression name. Longest suffixes first.
COMPRESSION_SUFFIXES = (
    (".tar.gz", "gz"),
    (".tgz", "gz"),
    (".gz", "gz"),
    (".tar.bz2", "bz2"),
    (".tbz2", "bz2"),
    (".tbz", "bz2"),
    (".bz2", "bz2"),
    (".tar.xz", "xz"),
    (".txz", "xz"),
    (".xz", "xz"),
)

# Type flags copied to destinations. AREGTYPE is the pre-POSIX "\0" flag.
REGULAR_TYPES = frozenset({tarfile.REGTYPE, tarfile.AREGTYPE, tarfile.CONTTYPE})

# PAX keeps long names and extended records intact when headers are
# re-encoded; plain ustar headers are emitted unchanged under it.
OUTPUT_FORMAT = tarfile.PAX_FORMAT

COPY_BUFSIZE = 1024 * 1024

__all__ = [
    "DEFAULT_TARGET_SIZE",
    "COMPRESSION_SUFFIXES",
    "REGULAR_TYPES",
    "OUTPUT_FORMAT",
    "COPY_BUFSIZE",
]
