"""CLI argument parsing and scan dispatch."""

from __future__ import annotations

from dupfind.config import create_config_interactive
from dupfind.config import load_config
from dupfind.config import merge_config_into_args
from dupfind.config import OUTPUT_MODES
from dupfind.hasher import find_duplicates
from dupfind.logging import configure_logging
from dupfind.report import human_lines
from dupfind.report import machine_lines
from dupfind.report import summary_line

import argparse
import logging
import pathlib
import sys


logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="dupfind",
        description="Find duplicate files by comparing file size, then SHA256 content hash.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only show warnings and errors")
    parser.add_argument(
        "--configure", action="store_true",
        help="Interactively create or update the config file",
    )

    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "-o", "--output", choices=OUTPUT_MODES, default=None,
        help="Output format (default: human)",
    )
    output.add_argument(
        "--human", dest="output", action="store_const", const="human",
        help="Readable listing of every duplicate group and a summary",
    )
    output.add_argument(
        "-m", "--machine", dest="output", action="store_const", const="machine",
        help="Only the duplicate paths, one per line",
    )

    parser.add_argument(
        "--progress", action=argparse.BooleanOptionalAction, default=None,
        help="Show progress bars on a terminal (default: on)",
    )
    parser.add_argument(
        "--chunk-size", type=_positive_int, default=None, metavar="BYTES",
        help="Read size used while hashing (default: 8192)",
    )
    parser.add_argument(
        "directories", nargs="*", type=pathlib.Path, metavar="DIRS",
        help="Directory to search (default: current directory)",
    )
    return parser


def cmd_scan(args: argparse.Namespace, root: pathlib.Path) -> None:
    """Find and report duplicate files below *root*."""
    logger.info(f"Scanning {root} ...")
    try:
        duplicates = find_duplicates(root, chunk_size=args.chunk_size, progress=args.progress)
    except OSError as exc:
        logger.error(f"Cannot read directory {root}: {exc.strerror or exc}")
        sys.exit(1)

    summary = duplicates.summarize()

    if args.output == "machine":
        for line in machine_lines(duplicates):
            print(line)
        return

    groups = duplicates.duplicate_groups()
    if groups:
        print(f"Found {len(groups)} duplicate group(s):\n")
        for line in human_lines(duplicates):
            print(line)
        print()
    else:
        print("No duplicates found.")
    print(summary_line(summary))


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    if args.configure:
        create_config_interactive()
        return

    merge_config_into_args(args, load_config())

    if len(args.directories) > 1:
        parser.error("comparing a directory against other directories is not supported")

    root = args.directories[0] if args.directories else pathlib.Path.cwd()
    cmd_scan(args, root)
