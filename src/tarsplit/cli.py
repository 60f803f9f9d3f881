"""Command line interface for tarsplit."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .api import SplitOptions, plan_dry_run, split
from .config import resolve_config
from .logging import configure_logging
from .reporting import get_reporter, set_reporter, set_verbosity
from .reporting import REPORTER_CHOICES, make_reporter
from .splitting.errors import SplitError


def _config(args: argparse.Namespace):
    return resolve_config(
        args.config,
        target_size=args.target_size,
        output_dir=getattr(args, "output_dir", None),
        manifest_path=getattr(args, "emit_manifest", None),
    )


def _split_cmd(args: argparse.Namespace) -> int:
    cfg = _config(args)
    split(
        SplitOptions(
            source=args.source,
            target_size=cfg.target_size,
            output_dir=cfg.output_dir,
            manifest_path=cfg.manifest_path,
        )
    )
    return 0


def _plan_cmd(args: argparse.Namespace) -> int:
    cfg = _config(args)
    plans, plan_dict = plan_dry_run(args.source, cfg.target_size)
    rep = get_reporter()
    rep.flush()
    if args.json:
        print(json.dumps(plan_dict, indent=2, sort_keys=True))
    else:
        for i, plan in enumerate(plans):
            rep.status(
                f"archive {i}: entries={len(plan.entries)} "
                f"bytes={plan.total_size}"
            )
    return 0


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("source", type=Path, help="Source archive (.tar[.gz|.bz2|.xz])")
    p.add_argument(
        "-s",
        "--target-size",
        dest="target_size",
        help="Target archive size in bytes; accepts suffixes like 500M or "
        "5GiB (default 5GiB, or $TARSPLIT_TARGET_SIZE)",
    )
    p.add_argument(
        "-c",
        "--config",
        type=Path,
        help="JSON or YAML file with target_size/output_dir/manifest keys",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tarsplit",
        description="Split a large tar archive into several archives at or "
        "under a target size",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=REPORTER_CHOICES,
        default="plain",
        help="Select reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("split", help="Split an archive")
    _add_common(s)
    s.add_argument(
        "-o",
        "--output-dir",
        dest="output_dir",
        type=Path,
        help="Directory for the <index>-<name> archives (default: cwd)",
    )
    s.add_argument(
        "--emit-manifest",
        dest="emit_manifest",
        type=Path,
        help="Optional path to write a JSON manifest of the split",
    )
    s.set_defaults(func=_split_cmd)

    pl = sub.add_parser("plan", help="Compute the split plan (dry run, no write)")
    _add_common(pl)
    pl.add_argument("--json", action="store_true", help="Emit JSON plan")
    pl.set_defaults(func=_plan_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    # A JSON plan document owns stdout; events move to stderr.
    owns_stdout = getattr(args, "json", False)
    set_reporter(
        make_reporter(
            args.reporter,
            isatty=sys.stderr.isatty(),
            stream=sys.stderr if owns_stdout else None,
        )
    )
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    rep = get_reporter()
    try:
        return args.func(args)
    except SplitError as exc:
        rep.flush()
        err = exc.to_dict()
        rep.error(str(exc), code=err["code"], context=err["context"])
        return 1
    except (ValueError, FileNotFoundError) as exc:
        rep.flush()
        rep.error(f"invalid configuration: {exc}")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
