#!/usr/bin/env python3
"""
bencodex - command-line front end for the Bencodex codec.

Usage:
  bencodex encode in.json -o out.dat      # JSON representation -> Bencodex
  bencodex decode in.dat [-o out.json]    # Bencodex -> JSON (or --format yaml)
  bencodex check [tests/vectors]          # run a conformance fixture set
  bencodex corpus -o DIR [--seed N] [-n COUNT]

"-" stands for stdin/stdout. Exits non-zero on any codec or file error.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from . import __version__, jsonrepr
from .conformance import run_fixtures
from .corpus import write_fixtures
from .decode import decode
from .encode import encode
from .errors import BencodexError, InvalidFormat

log = logging.getLogger("bencodex.cli")


def _read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def _write_output(path: str, data: bytes) -> None:
    if path == "-":
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    else:
        Path(path).write_bytes(data)
        log.info("wrote %d bytes to %s", len(data), path)


def cmd_encode(args) -> int:
    raw = _read_input(args.input)
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidFormat(f"JSON input is not UTF-8: {e.reason}", e.start) from None
    value = jsonrepr.loads(text)
    _write_output(args.output, encode(value, max_depth=args.max_depth))
    return 0


def cmd_decode(args) -> int:
    value = decode(_read_input(args.input), strict=args.strict, max_depth=args.max_depth)
    if args.format == "yaml":
        text = yaml.safe_dump(value, allow_unicode=True, sort_keys=False)
    else:
        text = jsonrepr.dumps(value, indent=args.indent) + "\n"
    _write_output(args.output, text.encode("utf-8"))
    return 0


def cmd_check(args) -> int:
    report = run_fixtures(args.root)
    for failure in report.failures:
        print(f"[FAIL] {failure.name}: {failure.reason}")
    print(f"\n{report.summary()}")
    return 0 if report.passed else 1


def cmd_corpus(args) -> int:
    written = write_fixtures(args.outdir, count=args.count, seed=args.seed)
    print(f"wrote {written} fixtures to {args.outdir}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="bencodex", description="Bencodex encoder/decoder")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("encode", help="encode a JSON representation")
    p.add_argument("input", help="JSON file, or - for stdin")
    p.add_argument("-o", "--output", default="-")
    p.add_argument("--max-depth", type=int, default=None)
    p.set_defaults(func=cmd_encode)

    p = sub.add_parser("decode", help="decode Bencodex bytes")
    p.add_argument("input", help="encoded file, or - for stdin")
    p.add_argument("-o", "--output", default="-")
    p.add_argument("--format", choices=["json", "yaml"], default="json")
    p.add_argument("--indent", type=int, default=None)
    p.add_argument("--strict", action="store_true", help="reject bytes after the value")
    p.add_argument("--max-depth", type=int, default=None)
    p.set_defaults(func=cmd_decode)

    p = sub.add_parser("check", help="run a conformance fixture set")
    p.add_argument("root", nargs="?", default=str(Path("tests") / "vectors"))
    p.set_defaults(func=cmd_check)

    p = sub.add_parser("corpus", help="generate random valid fixtures")
    p.add_argument("-o", "--outdir", required=True)
    p.add_argument("--seed", type=int, default=1337)
    p.add_argument("-n", "--count", type=int, default=128)
    p.set_defaults(func=cmd_corpus)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except BencodexError as e:
        print(f"error: {type(e).__name__}: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
