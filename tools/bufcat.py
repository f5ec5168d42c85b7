# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial
from __future__ import annotations

"""
CLI tool that slurps a file (or stdin) into a growable buffer.

The content is echoed to stdout and a one-line summary of the buffer
(size, capacity, unit) is written to stderr.
"""

import argparse
import logging
import sys

from growbuf.buffer import Buffer
from growbuf.config import BufferConfig, load_config


def build_buffer(args: argparse.Namespace, config: BufferConfig) -> Buffer:
    if args.unit is not None:
        config.unit = args.unit
    if args.max_capacity is not None:
        config.max_capacity = args.max_capacity
    return Buffer.from_config(config)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Read a file into a growable byte buffer and report its shape."
    )
    parser.add_argument("path", nargs="?", help="File to read (default: stdin).")
    parser.add_argument("--unit", type=int, help="Growth unit in bytes (default: GROWBUF_UNIT or 64).")
    parser.add_argument("--max-capacity", type=int, help="Refuse to allocate beyond this many bytes.")
    parser.add_argument("--expect", help="Fail unless the content equals this text.")
    parser.add_argument("--prefix", help="Fail unless the content starts with this text.")
    parser.add_argument("--quiet", action="store_true", help="Do not echo the content.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    config = load_config()
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")

    if args.unit is not None and args.unit <= 0:
        print("[error] --unit must be positive", file=sys.stderr)
        return 1

    buf = build_buffer(args, config)
    with buf:
        try:
            if args.path:
                with open(args.path, "rb") as stream:
                    ok = buf.putf(stream)
            else:
                ok = buf.putf(sys.stdin.buffer)
        except OSError as error:
            print(f"[error] {error}", file=sys.stderr)
            return 1

        if not ok:
            print(f"[error] could not read input (kept {buf.size} bytes)", file=sys.stderr)
            return 1

        if not args.quiet:
            sys.stdout.buffer.write(buf.view())
            sys.stdout.buffer.flush()
        print(f"size={buf.size} capacity={buf.capacity} unit={buf.unit}", file=sys.stderr)

        if args.expect is not None and not buf.streq(args.expect):
            print("[error] content does not match --expect", file=sys.stderr)
            return 1
        if args.prefix is not None and not buf.strprefix(args.prefix):
            print("[error] content does not start with --prefix", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
