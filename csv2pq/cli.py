"""Command-line entry point for converting CSV/TXT files to Parquet."""

from __future__ import annotations

import argparse
import os
import re
import sys
import time
from collections.abc import Sequence
from pathlib import Path

from csv2pq.files import check_path, prepare_output_dir
from csv2pq.progress import process_files

_DIGITS = re.compile(r"\+?[0-9]+")


def parse_positive_int(text: str) -> int:
    """Parse a thread count, which must be a positive integer."""
    if not _DIGITS.fullmatch(text):
        raise argparse.ArgumentTypeError(f"Not a valid number: {text!r}")
    value = int(text)
    if value >= 2**64:
        raise argparse.ArgumentTypeError(
            "Not a valid number: number too large to fit in target type"
        )
    if value == 0:
        raise argparse.ArgumentTypeError("Must be a positive integer")
    return value


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="csv2pq", description="Convert CSV/TXT files to Parquet"
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.1.0")
    parser.add_argument(
        "-i",
        "--input",
        required=True,
        type=Path,
        help="Path to input directory with CSV/TXT files",
    )
    parser.add_argument(
        "-o",
        "--output",
        required=True,
        type=Path,
        help="Path to output directory for Parquet files",
    )
    parser.add_argument(
        "-t",
        "--threads",
        type=parse_positive_int,
        default=None,
        help="Number of threads to use (default: all available)",
    )
    return parser.parse_args(argv)


def effective_threads(requested: int | None) -> int:
    """Return the thread count to announce, capped at the available CPUs."""
    available = os.cpu_count() or 1
    if requested is None:
        return available
    if requested <= 0:
        raise ValueError("Number of threads must be a positive integer")
    if requested > available:
        print(f"⚠️ Warning: Limiting thread count to {available} (max available)")
        return available
    return requested


def main(argv: Sequence[str] | None = None) -> int:
    """Run the converter; return the process exit status."""
    print("Start conversion...")
    start = time.perf_counter()
    args = parse_args(argv)
    try:
        check_path(args.input)
        prepare_output_dir(args.output)
        threads = effective_threads(args.threads)
        print(f"🚀 Using {threads} thread(s)")
        process_files(args.input, args.output, args.threads)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(f"✅ Conversion completed in {time.perf_counter() - start} seconds")
    return 0


if __name__ == "__main__":
    sys.exit(main())