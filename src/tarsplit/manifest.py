"""Split manifest: an optional JSON summary of one run.

Only written when asked for. Lists each output archive with the entries
planned into it, the planned payload total, what was actually copied and the
sha256 of the finished file, so consumers can verify uploads piece by piece.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Sequence

from .splitting.errors import write_error
from .splitting.planner import Plan
from .splitting.writer import SplitStats

__all__ = ["build_manifest", "manifest_dict", "file_sha256"]

_HASH_CHUNK = 1024 * 1024


def file_sha256(path: Path) -> str:
    h = hashlib.sha256()
    with path.open("rb") as f:
        for block in iter(lambda: f.read(_HASH_CHUNK), b""):
            h.update(block)
    return h.hexdigest()


def manifest_dict(
    source: Path,
    target_size: int,
    plans: Sequence[Plan],
    stats: SplitStats,
) -> dict[str, Any]:
    archives = []
    for plan, out in zip(plans, stats.archives):
        archives.append(
            {
                "index": out.index,
                "file": out.path.name,
                "file_size": out.path.stat().st_size,
                "sha256": file_sha256(out.path),
                "planned_bytes": plan.total_size,
                "copied_bytes": out.bytes,
                "copied_entries": out.entries,
                "oversized": plan.exceeds(target_size),
                "entries": [e.name for e in plan.entries if e.is_regular],
            }
        )
    return {
        "version": 1,
        "source": source.name,
        "target_size": target_size,
        "archives": archives,
        "counts": {
            "archives": len(archives),
            "entries": stats.entries,
            "bytes": stats.bytes,
            "skipped": stats.skipped,
        },
    }


def build_manifest(
    output_path: Path,
    source: Path,
    target_size: int,
    plans: Sequence[Plan],
    stats: SplitStats,
) -> Path:
    """Write the manifest to ``output_path``; failures raise ``WriteError``."""
    try:
        data = manifest_dict(source, target_size, plans, stats)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, sort_keys=True)
            f.write("\n")
    except OSError as exc:
        raise write_error(
            f"cannot write manifest: {exc.strerror or exc}",
            path=str(output_path),
            operation="manifest",
        ) from exc
    return output_path
