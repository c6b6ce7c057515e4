"""Command line interface for sprset."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .api import (
    extract_sprset,
    inspect_sprset,
    read_sprset,
    save_to_file,
    validate_sprset,
)
from .container.errors import SprError
from .database import SpriteDatabase, load_database
from .diff import diff_sprsets
from .logging import configure_logging, step
from .reporting import (
    PlainReporter,
    RichReporter,
    SilentReporter,
    get_reporter,
    set_reporter,
    set_verbosity,
)


def _load_db(path: Path | None) -> SpriteDatabase | None:
    if path is None:
        return None
    step(f"loading database {path.name}")
    return load_database(path)


def _inspect_cmd(args: argparse.Namespace) -> int:
    step(f"inspecting {args.file.name}")
    info = inspect_sprset(args.file)
    rep = get_reporter()
    rep.flush()
    if args.json:
        print(json.dumps(info, indent=2, sort_keys=True))
        return 0
    rep.status(
        f"{args.file.name}: size={info['file_size']} flags={info['flags']:#x} "
        f"textures={len(info['textures'])} sprites={len(info['sprites'])}"
    )
    for t in info["textures"]:
        rep.status(
            f"texture {t['name'] or '<unnamed>'}: {t['kind']} "
            f"{t['width']}x{t['height']} {t['format']} layers={t['array_size']}"
        )
    for s in info["sprites"]:
        x, y, w, h = s["pixel_region"]
        rep.status(
            f"sprite {s['name'] or '<unnamed>'}: {w:g}x{h:g} at {x:g},{y:g} "
            f"in {s['texture_name']} ({s['screen_mode']})"
        )
    return 0


def _validate_cmd(args: argparse.Namespace) -> int:
    step(f"validating {args.file.name}")
    issues = validate_sprset(args.file)
    rep = get_reporter()
    for issue in issues:
        rep.warning(issue)
    rep.status(f"Validation: {len(issues)} issue(s) in {args.file.name}")
    return 1 if issues else 0


def _extract_cmd(args: argparse.Namespace) -> int:
    sprset = read_sprset(args.file, _load_db(args.db))
    written = extract_sprset(sprset, args.outdir, sprites=args.sprites)
    get_reporter().status(f"Extracted {len(written)} file(s) to {args.outdir}")
    return 0


def _replace_cmd(args: argparse.Namespace) -> int:
    sprset = read_sprset(args.file, _load_db(args.db))
    step(f"replacing texture {args.texture}")
    sprset.replace_texture(args.texture, args.image)
    size = save_to_file(sprset, args.output)
    get_reporter().status(f"Wrote {args.output} ({size} bytes)")
    return 0


def _diff_cmd(args: argparse.Namespace) -> int:
    step("diffing sprite sets")
    result = diff_sprsets(args.left, args.right)
    rep = get_reporter()
    rep.section("Diff results")
    diff_count = result["summary"]["count"]
    rep.status(
        f"Diff summary: count={diff_count} "
        f"left={args.left.name} right={args.right.name}"
    )
    rep.flush()
    print(json.dumps(result, indent=2, sort_keys=True))
    return 1 if diff_count else 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sprset", description="Sprite set container tool"
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
        choices=["plain", "rich", "silent"],
        default="plain",
        help="Select reporter backend: plain (default), rich, silent",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    i = sub.add_parser("inspect", help="Show the structure of a container")
    i.add_argument("file", type=Path)
    i.add_argument("--json", action="store_true", help="Emit JSON summary")
    i.set_defaults(func=_inspect_cmd)

    v = sub.add_parser("validate", help="Check a container for problems")
    v.add_argument("file", type=Path)
    v.set_defaults(func=_validate_cmd)

    e = sub.add_parser("extract", help="Decode textures to PNG files")
    e.add_argument("file", type=Path)
    e.add_argument("outdir", type=Path)
    e.add_argument("--db", type=Path, help="Sprite name database (JSON/YAML)")
    e.add_argument(
        "--sprites",
        action="store_true",
        help="Also write each sprite's cropped region",
    )
    e.set_defaults(func=_extract_cmd)

    rp = sub.add_parser("replace", help="Replace one texture and rewrite")
    rp.add_argument("file", type=Path)
    rp.add_argument("texture")
    rp.add_argument("image", type=Path)
    rp.add_argument("output", type=Path)
    rp.add_argument("--db", type=Path, help="Sprite name database (JSON/YAML)")
    rp.set_defaults(func=_replace_cmd)

    d = sub.add_parser("diff", help="Diff two containers")
    d.add_argument("left", type=Path)
    d.add_argument("right", type=Path)
    d.set_defaults(func=_diff_cmd)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.reporter == "silent":
        set_reporter(SilentReporter())
    elif args.reporter == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:
        # rich falls back to plain without a TTY
        set_reporter(PlainReporter())
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    try:
        return args.func(args)
    except SprError as e:
        rep = get_reporter()
        rep.flush()
        rep.error(str(e))
        return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
