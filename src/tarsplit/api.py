"""High-level API for tarsplit.

Runs the three stages strictly in order: index the source, plan the split,
rewrite the source into one archive per plan. Each stage completes before
the next one starts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List

from .logging import get_logger
from .manifest import build_manifest
from .reporting import get_reporter, task
from .splitting.constants import DEFAULT_TARGET_SIZE
from .splitting.errors import write_error
from .splitting.index import Entry, build_inventory
from .splitting.planner import Plan, plan_split, to_plan_dict
from .splitting.writer import WrittenArchive, split_archive
from .utils.paths import destination_namer

__all__ = [
    "SplitOptions",
    "SplitResult",
    "split",
    "plan_dry_run",
    "index_and_plan",
]


@dataclass(slots=True)
class SplitOptions:
    source: Path
    target_size: int = DEFAULT_TARGET_SIZE
    # Defaults to the current working directory.
    output_dir: Path | None = None
    # Optional path; when provided a manifest JSON is written after the split
    manifest_path: Path | None = None


@dataclass(slots=True)
class SplitResult:
    plans: List[Plan]
    archives: List[WrittenArchive] = field(default_factory=list)
    skipped: int = 0
    manifest_path: Path | None = None

    @property
    def outputs(self) -> List[Path]:
        return [a.path for a in self.archives]


def index_and_plan(source: Path, target_size: int) -> List[Plan]:
    """Index ``source`` and compute its plan set, reporting both stages."""
    rep = get_reporter()
    with task("index.scan", f"Index {source.name}") as done:
        inventory: List[Entry] = build_inventory(source)
        done["entries"] = len(inventory)
        done["bytes"] = sum(e.size for e in inventory)
    regular = sum(1 for e in inventory if e.is_regular)
    rep.status(
        f"Index summary: entries={len(inventory)} regular={regular} "
        f"bytes={sum(e.size for e in inventory)}"
    )
    with task("plan.pack", "Plan archives") as done:
        plans = plan_split(inventory, target_size)
        done["entries"] = len(inventory)
        done["plans"] = len(plans)
    oversized = [i for i, p in enumerate(plans) if p.exceeds(target_size)]
    rep.status(
        f"Plan summary: plans={len(plans)} target_size={target_size} "
        f"largest={max((p.total_size for p in plans), default=0)} "
        f"oversized={len(oversized)}"
    )
    for i in oversized:
        entry = plans[i].entries[0]
        rep.warning(
            f"Entry {entry.name} ({entry.size} bytes) exceeds the target "
            f"size on its own; archive {i} will be oversized"
        )
    return plans


def split(options: SplitOptions) -> SplitResult:
    logger = get_logger()
    rep = get_reporter()
    source = Path(options.source)
    plans = index_and_plan(source, options.target_size)
    if options.output_dir is not None:
        try:
            options.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise write_error(
                f"cannot create output directory: {exc.strerror or exc}",
                path=str(options.output_dir),
                operation="mkdir",
            ) from exc
    stats = split_archive(
        source, plans, destination_namer(source, options.output_dir)
    )
    rep.status(
        f"Split summary: archives={len(stats.archives)} "
        f"entries={stats.entries} bytes={stats.bytes} skipped={stats.skipped}"
    )
    if stats.skipped:
        logger.warning(
            "%d non-regular entries (directories, links, devices) were not "
            "copied to any archive",
            stats.skipped,
        )
    result = SplitResult(
        plans=plans, archives=stats.archives, skipped=stats.skipped
    )
    if options.manifest_path is not None:
        with task("manifest.emit", "Emit manifest"):
            result.manifest_path = build_manifest(
                options.manifest_path,
                source,
                options.target_size,
                plans,
                stats,
            )
        rep.status(
            f"Manifest summary: file={options.manifest_path.name} "
            f"archives={len(stats.archives)}"
        )
    return result


def plan_dry_run(
    source: str | Path, target_size: int = DEFAULT_TARGET_SIZE
) -> tuple[List[Plan], dict[str, Any]]:
    """Compute the plan set for ``source`` without writing anything.

    Returns (plans, plan_dict) where plan_dict is JSON-serialisable.
    """
    plans = index_and_plan(Path(source), target_size)
    return plans, to_plan_dict(plans, target_size)
