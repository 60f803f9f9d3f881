"""Destination naming."""

from __future__ import annotations
from pathlib import Path
from typing import Callable

__all__ = ["destination_path", "destination_namer"]


def destination_path(
    source: Path, index: int, output_dir: Path | None = None
) -> Path:
    """``<output_dir>/<index>-<source basename>``; cwd when no dir is given."""
    base = output_dir if output_dir is not None else Path.cwd()
    return base / f"{index}-{source.name}"


def destination_namer(
    source: str | Path, output_dir: Path | None = None
) -> Callable[[int], Path]:
    src = Path(source)
    return lambda index: destination_path(src, index, output_dir)
