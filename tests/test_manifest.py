import hashlib
import json
from pathlib import Path

from archive_helper import make_archive, payload
from tarsplit.api import SplitOptions, split


def test_manifest_lists_archives_and_hashes(tmp_path: Path):
    src = make_archive(
        tmp_path / "layer.tar",
        [
            ("a.bin", payload(100)),
            ("b.bin", payload(90)),
            ("c.bin", payload(80)),
            ("d.bin", payload(5)),
            ("dir/", None),
        ],
    )
    out = tmp_path / "out"
    manifest_path = out / "manifest.json"
    result = split(
        SplitOptions(
            source=src,
            target_size=150,
            output_dir=out,
            manifest_path=manifest_path,
        )
    )
    assert result.manifest_path == manifest_path
    data = json.loads(manifest_path.read_text(encoding="utf-8"))

    assert data["version"] == 1
    assert data["source"] == "layer.tar"
    assert data["target_size"] == 150
    assert data["counts"] == {
        "archives": 3,
        "entries": 4,
        "bytes": 275,
        "skipped": 1,
    }
    files = [a["file"] for a in data["archives"]]
    assert files == ["0-layer.tar", "1-layer.tar", "2-layer.tar"]
    first = data["archives"][0]
    # The directory entry was planned but is not a copied entry.
    assert first["entries"] == ["a.bin", "d.bin"]
    assert first["copied_entries"] == 2
    assert first["copied_bytes"] == 105
    for a in data["archives"]:
        p = out / a["file"]
        assert a["sha256"] == hashlib.sha256(p.read_bytes()).hexdigest()
        assert a["file_size"] == p.stat().st_size
        assert a["oversized"] is False


def test_manifest_flags_oversized_archive(tmp_path: Path):
    src = make_archive(
        tmp_path / "layer.tar", [("huge", payload(4000)), ("s", b"x")]
    )
    manifest_path = tmp_path / "m.json"
    split(
        SplitOptions(
            source=src,
            target_size=1000,
            output_dir=tmp_path / "out",
            manifest_path=manifest_path,
        )
    )
    data = json.loads(manifest_path.read_text(encoding="utf-8"))
    assert [a["oversized"] for a in data["archives"]] == [False, True]
    assert data["archives"][1]["planned_bytes"] == 4000
