from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import GenConfig, default_pkg, load_config
from .errors import GenMethodsError


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="genmethods",
        description="Generate Go methods for free functions taking a handle as first parameter.",
    )
    parser.add_argument("-o", "--output", default=None, help="Output path (default: stdout).")
    parser.add_argument(
        "-pkg",
        "--pkg",
        default=None,
        help=f"Go package path (default: GENMETHODS_PKG or {default_pkg()}).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose debug output.")
    parser.add_argument(
        "--config",
        default=None,
        help="JSON file with receiver_types, renames and pkg (optional).",
    )
    parser.add_argument("--dir", default=None, help="Directory to resolve the package from (default: cwd).")
    parser.add_argument("--gofmt", default="gofmt", help="gofmt executable used to format output.")
    parser.add_argument("--no-gofmt", action="store_true", help="Skip the gofmt pass.")

    args = parser.parse_args(argv)

    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from .gen import generate

    try:
        cfg = load_config(Path(args.config)) if args.config else GenConfig()
        cfg = GenConfig(
            pkg=args.pkg or cfg.pkg,
            receiver_types=cfg.receiver_types,
            renames=cfg.renames,
            gofmt=None if args.no_gofmt else args.gofmt,
        )
        text = generate(
            cfg,
            output=args.output,
            work_dir=Path(args.dir) if args.dir else None,
        )
    except GenMethodsError as e:
        print(f"genmethods: {_error_chain(e)}", file=sys.stderr)
        raise SystemExit(1)

    if args.output is None:
        sys.stdout.write(text)


def _error_chain(e: BaseException) -> str:
    # Wrapped genmethods errors already carry their cause's message.
    parts = [str(e)]
    cause = e.__cause__
    while cause is not None:
        if not isinstance(cause, GenMethodsError):
            parts.append(f"caused by: {type(cause).__name__}: {cause}")
        cause = cause.__cause__
    return "\n".join(parts)
