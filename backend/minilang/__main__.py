"""Command line entry point: ``python -m minilang [FILE]``."""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .compiler import compile_source

EMIT_CHOICES = ("tokens", "ast", "ir", "optimized", "code")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="minilang", description="Compile a minilang program.")
    parser.add_argument("file", nargs="?", help="source file (reads stdin when omitted)")
    parser.add_argument("--emit", choices=EMIT_CHOICES, default="code",
                        help="which phase output to print (default: code)")
    parser.add_argument("--log-level", default="WARNING",
                        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
                        help="logging verbosity")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(levelname)s:%(name)s: %(message)s')

    if args.file:
        with open(args.file, encoding="utf-8") as f:
            source = f.read()
    else:
        source = sys.stdin.read()

    result = compile_source(source)
    if not result.success:
        for diag in result.diagnostics:
            print(diag.format(), file=sys.stderr)
        return 1

    if args.emit == "code":
        print(result.code)
    else:
        key = {"optimized": "optimizedIr"}.get(args.emit, args.emit)
        print(json.dumps(result.to_dict()[key], indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
