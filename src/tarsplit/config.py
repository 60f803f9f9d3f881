"""Configuration loading (JSON/YAML) and size parsing for tarsplit."""

from __future__ import annotations

import json
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from .splitting.constants import DEFAULT_TARGET_SIZE

__all__ = [
    "SplitConfig",
    "ENV_TARGET_SIZE",
    "parse_size",
    "load_config",
    "resolve_config",
]

ENV_TARGET_SIZE = "TARSPLIT_TARGET_SIZE"

_UNITS = {
    "": 1,
    "k": 1000,
    "m": 1000**2,
    "g": 1000**3,
    "t": 1000**4,
    "ki": 1024,
    "mi": 1024**2,
    "gi": 1024**3,
    "ti": 1024**4,
}
_SIZE_RE = re.compile(r"^\s*(\d+)\s*([kmgt]i?)?b?\s*$", re.IGNORECASE)


@dataclass(slots=True)
class SplitConfig:
    target_size: int = DEFAULT_TARGET_SIZE
    output_dir: Path | None = None
    manifest_path: Path | None = None


def parse_size(value: int | str) -> int:
    """Parse a byte count: ``1024``, ``"500M"``, ``"5GiB"``, ``"8g"``.

    Plain suffixes are decimal, ``i`` suffixes binary. The result must be
    positive.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid size: {value!r}")
    if isinstance(value, int):
        size = value
    else:
        m = _SIZE_RE.match(str(value))
        if not m:
            raise ValueError(f"invalid size: {value!r}")
        size = int(m.group(1)) * _UNITS[(m.group(2) or "").lower()]
    if size <= 0:
        raise ValueError(f"size must be positive: {value!r}")
    return size


def _read_config_data(path: str | Path) -> dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in {".yaml", ".yml"}:
        data: Any = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("Root of configuration must be an object")
    unknown = set(data) - {"target_size", "output_dir", "manifest"}
    if unknown:
        raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
    return data


def _apply(cfg: SplitConfig, data: Mapping[str, Any], base_dir: Path) -> None:
    if "target_size" in data:
        cfg.target_size = parse_size(data["target_size"])
    if data.get("output_dir") is not None:
        cfg.output_dir = base_dir / str(data["output_dir"])
    if data.get("manifest") is not None:
        cfg.manifest_path = base_dir / str(data["manifest"])


def load_config(path: str | Path) -> SplitConfig:
    """Read a config file. Keys: ``target_size``, ``output_dir``,
    ``manifest``. Relative paths resolve against the file's directory."""
    cfg = SplitConfig()
    _apply(cfg, _read_config_data(path), Path(path).parent)
    return cfg


def resolve_config(
    config_path: str | Path | None = None,
    *,
    target_size: int | str | None = None,
    output_dir: Path | None = None,
    manifest_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> SplitConfig:
    """Merge defaults, environment, config file and explicit values.

    Later sources win: default < ``TARSPLIT_TARGET_SIZE`` < config file <
    explicit arguments.
    """
    env = os.environ if environ is None else environ
    cfg = SplitConfig()
    if env.get(ENV_TARGET_SIZE):
        cfg.target_size = parse_size(env[ENV_TARGET_SIZE])
    if config_path is not None:
        _apply(cfg, _read_config_data(config_path), Path(config_path).parent)
    if target_size is not None:
        cfg.target_size = parse_size(target_size)
    if output_dir is not None:
        cfg.output_dir = output_dir
    if manifest_path is not None:
        cfg.manifest_path = manifest_path
    return cfg
