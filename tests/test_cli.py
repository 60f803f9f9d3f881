from __future__ import annotations

"""CLI: subcommands, exit codes and error reporting."""
import json
from pathlib import Path

from archive_helper import make_archive, payload
from tarsplit import cli

FILES = [
    ("a.bin", payload(100)),
    ("b.bin", payload(90)),
    ("c.bin", payload(80)),
    ("d.bin", payload(5)),
]


def test_split_command(tmp_path: Path, capsys):
    src = make_archive(tmp_path / "layer.tar", FILES)
    out = tmp_path / "out"
    rc = cli.main(["split", str(src), "-s", "150", "-o", str(out)])
    assert rc == 0
    assert sorted(p.name for p in out.iterdir()) == [
        "0-layer.tar",
        "1-layer.tar",
        "2-layer.tar",
    ]
    err = capsys.readouterr().err
    assert "Split summary: archives=3 entries=4 bytes=275 skipped=0" in err


def test_plan_command_json(tmp_path: Path, capsys):
    src = make_archive(tmp_path / "layer.tar", FILES)
    rc = cli.main(["-r", "silent", "plan", str(src), "-s", "150", "--json"])
    assert rc == 0
    plan = json.loads(capsys.readouterr().out)
    assert [[e["name"] for e in p["entries"]] for p in plan["plans"]] == [
        ["a.bin", "d.bin"],
        ["b.bin"],
        ["c.bin"],
    ]
    assert plan["target_size"] == 150
    # Dry run writes nothing next to the source.
    assert sorted(p.name for p in tmp_path.iterdir()) == ["layer.tar"]


def test_missing_source_exits_nonzero(tmp_path: Path, capsys):
    rc = cli.main(["split", str(tmp_path / "nope.tar"), "-o", str(tmp_path)])
    assert rc == 1
    err = capsys.readouterr().err
    assert "ERROR" in err
    assert "E_OPEN" in err


def test_bad_size_exits_nonzero(tmp_path: Path, capsys):
    src = make_archive(tmp_path / "layer.tar", FILES)
    rc = cli.main(["plan", str(src), "-s", "lots"])
    assert rc == 1
    assert "invalid configuration" in capsys.readouterr().err


def test_config_file_and_manifest(tmp_path: Path):
    src = make_archive(tmp_path / "layer.tar", FILES)
    cfg = tmp_path / "split.yaml"
    cfg.write_text(
        "target_size: 150\noutput_dir: parts\nmanifest: parts/manifest.json\n",
        encoding="utf-8",
    )
    rc = cli.main(["-r", "silent", "split", str(src), "--config", str(cfg)])
    assert rc == 0
    manifest = json.loads((tmp_path / "parts" / "manifest.json").read_text())
    assert manifest["counts"]["archives"] == 3


def test_json_reporter_emits_summaries(tmp_path: Path, capsys):
    src = make_archive(tmp_path / "layer.tar", FILES)
    rc = cli.main(
        ["-r", "json", "split", str(src), "-s", "150", "-o", str(tmp_path / "o")]
    )
    assert rc == 0
    events = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    summaries = {
        e["summary_type"]: e for e in events if e["event"] == "summary"
    }
    assert summaries["plan"]["plans"] == 3
    assert summaries["split"]["entries"] == 4
    assert summaries["split"]["bytes"] == 275
    ends = [e for e in events if e["event"] == "task_end"]
    assert [e["id"] for e in ends] == ["index.scan", "plan.pack", "split.write"]
    assert all(e["status"] == "success" for e in ends)


def test_json_reporter_error_carries_code(tmp_path: Path, capsys):
    rc = cli.main(["-r", "json", "plan", str(tmp_path / "nope.tar")])
    assert rc == 1
    events = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    errors = [e for e in events if e.get("level") == "error"]
    assert len(errors) == 1
    assert errors[0]["code"] == "E_OPEN"
    assert errors[0]["context"]["operation"] == "open"


def test_zero_byte_source_splits_into_nothing(tmp_path: Path):
    src = tmp_path / "layer.tar"
    src.write_bytes(b"")
    out = tmp_path / "out"
    rc = cli.main(["-r", "silent", "split", str(src), "-o", str(out)])
    assert rc == 0
    assert list(out.iterdir()) == []


def test_output_dir_under_a_file_is_write_error(tmp_path: Path, capsys):
    src = make_archive(tmp_path / "layer.tar", FILES)
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    rc = cli.main(["split", str(src), "-o", str(blocker / "sub")])
    assert rc == 1
    err = capsys.readouterr().err
    assert "ERROR: E_WRITE" in err
    assert "mkdir" in err


def test_unwritable_manifest_is_write_error(tmp_path: Path, capsys):
    src = make_archive(tmp_path / "layer.tar", FILES)
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    rc = cli.main(
        [
            "split",
            str(src),
            "-s",
            "150",
            "-o",
            str(tmp_path / "out"),
            "--emit-manifest",
            str(blocker / "manifest.json"),
        ]
    )
    assert rc == 1
    err = capsys.readouterr().err
    assert "ERROR: E_WRITE" in err
    assert "manifest" in err


def test_json_events_leave_plan_document_alone(tmp_path: Path, capsys):
    src = make_archive(tmp_path / "layer.tar", FILES)
    rc = cli.main(["-r", "json", "plan", str(src), "-s", "150", "--json"])
    assert rc == 0
    captured = capsys.readouterr()
    plan = json.loads(captured.out)
    assert plan["statistics"]["plan_count"] == 3
    events = [json.loads(line) for line in captured.err.splitlines()]
    assert any(e["event"] == "summary" for e in events)
