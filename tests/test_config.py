from __future__ import annotations

"""Size parsing and configuration precedence."""
import json
from pathlib import Path

import pytest
import yaml

from tarsplit.config import (
    ENV_TARGET_SIZE,
    SplitConfig,
    load_config,
    parse_size,
    resolve_config,
)
from tarsplit.splitting.constants import DEFAULT_TARGET_SIZE


@pytest.mark.parametrize(
    "value,expected",
    [
        (1024, 1024),
        ("1024", 1024),
        ("500M", 500_000_000),
        ("5GiB", 5 * 1024**3),
        ("8g", 8_000_000_000),
        ("64 KiB", 64 * 1024),
        ("2TB", 2 * 1000**4),
    ],
)
def test_parse_size(value, expected):
    assert parse_size(value) == expected


@pytest.mark.parametrize("value", ["", "abc", "5XB", "-1", 0, "0M", True])
def test_parse_size_rejects(value):
    with pytest.raises(ValueError):
        parse_size(value)


def test_defaults():
    cfg = resolve_config(environ={})
    assert cfg == SplitConfig()
    assert cfg.target_size == DEFAULT_TARGET_SIZE == 5368709120


def test_yaml_config_resolves_relative_paths(tmp_path: Path):
    p = tmp_path / "split.yaml"
    p.write_text(
        yaml.safe_dump(
            {"target_size": "1MiB", "output_dir": "parts", "manifest": "m.json"}
        ),
        encoding="utf-8",
    )
    cfg = load_config(p)
    assert cfg.target_size == 1024 * 1024
    assert cfg.output_dir == tmp_path / "parts"
    assert cfg.manifest_path == tmp_path / "m.json"


def test_json_config(tmp_path: Path):
    p = tmp_path / "split.json"
    p.write_text(json.dumps({"target_size": 4096}), encoding="utf-8")
    assert load_config(p).target_size == 4096


def test_unknown_key_rejected(tmp_path: Path):
    p = tmp_path / "split.json"
    p.write_text(json.dumps({"target": 1}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(p)


def test_non_mapping_root_rejected(tmp_path: Path):
    p = tmp_path / "split.yaml"
    p.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(p)


def test_precedence(tmp_path: Path):
    env = {ENV_TARGET_SIZE: "2K"}
    assert resolve_config(environ=env).target_size == 2000

    p = tmp_path / "split.json"
    p.write_text(json.dumps({"target_size": "3K"}), encoding="utf-8")
    assert resolve_config(p, environ=env).target_size == 3000
    assert resolve_config(p, target_size="4K", environ=env).target_size == 4000

    out = tmp_path / "o"
    assert resolve_config(output_dir=out, environ={}).output_dir == out
