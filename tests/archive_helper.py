from __future__ import annotations

"""Helpers for building small tar archives in tests.

Usage:
    from archive_helper import make_archive, payload
    make_archive(tmp_path / "src.tar", [("a.bin", payload(100)), ("d/", None)])

``None`` data means a directory; ``("name", "->target")`` strings starting
with ``->`` make a symlink.
"""
import io
import tarfile
from pathlib import Path
from typing import Sequence, Tuple, Union

Member = Tuple[str, Union[bytes, str, None]]

_WRITE_MODES = {".gz": "w:gz", ".bz2": "w:bz2", ".xz": "w:xz"}


def payload(size: int, seed: int = 0) -> bytes:
    """Deterministic, non-repeating-looking bytes of ``size`` length."""
    return bytes((i * 31 + seed * 7 + (i >> 8)) & 0xFF for i in range(size))


def make_archive(
    path: Path,
    members: Sequence[Member],
    *,
    fmt: int = tarfile.USTAR_FORMAT,
) -> Path:
    mode = _WRITE_MODES.get(path.suffix, "w")
    with tarfile.open(path, mode, format=fmt) as tf:
        for i, (name, data) in enumerate(members):
            info = tarfile.TarInfo(name)
            info.mtime = 1_600_000_000 + i
            info.uid = 1000 + i
            info.gid = 100
            info.uname = "builder"
            info.gname = "staff"
            if data is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tf.addfile(info)
            elif isinstance(data, str) and data.startswith("->"):
                info.type = tarfile.SYMTYPE
                info.linkname = data[2:]
                info.mode = 0o777
                tf.addfile(info)
            else:
                raw = data.encode() if isinstance(data, str) else data
                info.size = len(raw)
                info.mode = 0o640
                tf.addfile(info, io.BytesIO(raw))
    return path


def read_members(path: Path) -> dict[str, tuple[tarfile.TarInfo, bytes]]:
    """name -> (TarInfo, payload) for every member of ``path``."""
    out: dict[str, tuple[tarfile.TarInfo, bytes]] = {}
    with tarfile.open(path, "r:*") as tf:
        for m in tf.getmembers():
            data = b""
            if m.isreg():
                f = tf.extractfile(m)
                assert f is not None
                data = f.read()
            out[m.name] = (m, data)
    return out
