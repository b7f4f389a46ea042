import argparse
import io
import logging
import sys
from typing import List, Optional, TextIO

from config import LOG_LEVELS, Settings
from stream import LineStamper, Mode


logger = logging.getLogger("ts")


# ---------------- CLI ----------------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ts",
        description="Add timestamps to the beginning of each line of input.",
        epilog=(
            'Format is a strftime format string. Default: "%b %d %H:%M:%S". '
            "Extensions: %.S (seconds with subsecond), %.s (unix timestamp "
            "with subsecond), %.T (time with subsecond), %N (nanoseconds)."
        ),
    )
    parser.add_argument(
        "-r",
        dest="relative",
        action="store_true",
        help="Convert existing timestamps to relative times "
        "(or to FORMAT, when one is given)",
    )

    elapsed = parser.add_mutually_exclusive_group()
    elapsed.add_argument(
        "-i",
        dest="incremental",
        action="store_true",
        help="Report incremental timestamps (time since last timestamp)",
    )
    elapsed.add_argument(
        "-s",
        dest="since_start",
        action="store_true",
        help="Report incremental timestamps (time since start)",
    )

    parser.add_argument("-m", dest="monotonic", action="store_true", help="Use monotonic clock")
    parser.add_argument(
        "-u",
        dest="unique",
        action="store_true",
        help="Only output lines that are unique (different from previous line)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Diagnostics level on stderr",
    )
    parser.add_argument("format", nargs="?", default=None)

    return parser


def parse_args(argv: Optional[List[str]] = None):
    return build_parser().parse_args(argv)


def byte_transparent(stream: TextIO) -> TextIO:
    """
    Make a byte-backed text stream lossless.

    Undecodable bytes become lone surrogates on input and are written
    back as the same bytes, so lines the engine does not touch come out
    unchanged. In-memory text streams have no bytes and are left alone.
    """
    if isinstance(stream, io.TextIOWrapper):
        stream.reconfigure(encoding="utf-8", errors="surrogateescape", newline="")
    return stream


def select_mode(args) -> Mode:
    # -r wins over -i/-s, as it always has
    if args.relative:
        return Mode.RELATIVE
    if args.incremental:
        return Mode.INCREMENTAL
    if args.since_start:
        return Mode.SINCE_START
    return Mode.ABSOLUTE


# ---------------- Main ----------------

def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings.from_env()
    except ValueError as e:
        parser.error(str(e))

    logging.basicConfig(
        level=args.log_level or settings.log_level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    mode = select_mode(args)

    # TS_FORMAT only replaces the default; in relative mode the
    # humanized output is the default, so only FORMAT switches it off.
    template = args.format
    if template is None and mode != Mode.RELATIVE:
        template = settings.format

    stamper = LineStamper(
        mode=mode,
        template=template,
        monotonic=args.monotonic,
        unique=args.unique,
        line_capacity=settings.line_capacity,
        format_capacity=settings.format_capacity,
    )

    stdin = byte_transparent(stdin or sys.stdin)
    stdout = byte_transparent(stdout or sys.stdout)

    for line in stdin:
        out = stamper.process(line)
        if out is None:
            continue
        stdout.write(out)
        stdout.flush()

    m = stamper.metrics
    logger.info(
        "stamped=%d converted=%d passed_through=%d skipped=%d",
        m.stamped,
        m.converted,
        m.passed_through,
        m.skipped,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
