"""Split a local CSV file from the command line.

Usage:
    csvninja-split clients.csv --max-rows 500
    csvninja-split clients.csv --max-rows 500 --out parts/
    csvninja-split clients.csv --max-rows 500 --zip clients_split.zip
    csvninja-split export.csv --max-rows 10000 --no-header --streaming

Parts are named ``{input stem}_part{N}.csv``. With ``--streaming`` the file is
read one record at a time, so inputs larger than memory can be split.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from csvninja.logging_config import configure_logging
from csvninja.messages import render
from csvninja.settings import get_settings
from csvninja.splitter import (
    ArtifactSink,
    Deadline,
    DirectorySink,
    MemorySink,
    RawUpload,
    SplitterError,
    base_name_from_filename,
    parse_row_limit,
    split_csv,
    stream_partition,
)
from csvninja.splitter.archive import build_zip_archive
from csvninja.splitter.models import SplitResult


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csvninja-split",
        description="Split a CSV file into parts of at most N data rows",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("input", type=Path, help="CSV file to split")
    parser.add_argument("--max-rows", required=True, help="Data rows per output file")
    parser.add_argument("--no-header", action="store_true", help="The first row is data, not column names")
    destination = parser.add_mutually_exclusive_group()
    destination.add_argument("--out", type=Path, help="Output directory (default: ./{stem}_parts)")
    destination.add_argument("--zip", type=Path, help="Write every part into this ZIP archive instead")
    parser.add_argument("--streaming", action="store_true", help="Parse and write one record at a time")
    parser.add_argument("--timeout", type=float, default=None, help="Abort after this many seconds")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--log-level", default=None, help="Log level (default: LOG_LEVEL setting)")
    return parser


def _split(args: argparse.Namespace, max_rows: int, sink: ArtifactSink) -> SplitResult:
    settings = get_settings()
    has_header = not args.no_header
    deadline = Deadline(args.timeout)

    if not args.streaming:
        upload = RawUpload(content=args.input.read_bytes(), filename=args.input.name)
        return split_csv(upload, max_rows, has_header, sink, settings, deadline=deadline)

    with args.input.open("r", encoding="utf-8-sig", newline="") as handle:
        stats = stream_partition(
            handle,
            has_header,
            max_rows,
            base_name_from_filename(args.input.name),
            sink,
            row_limit=settings.max_rows_per_file_limit,
            deadline=deadline,
        )
    return SplitResult(
        message=render("split_success", settings.locale, count=stats.artifacts),
        files=sink.summaries,
        total_rows=stats.data_rows,
        max_rows_per_file=max_rows,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    if not args.input.is_file():
        print(f"❌ Input file not found: {args.input}", file=sys.stderr)
        return 1

    try:
        max_rows = parse_row_limit(args.max_rows)
        if args.zip:
            result = _split(args, max_rows, MemorySink())
            args.zip.parent.mkdir(parents=True, exist_ok=True)
            args.zip.write_bytes(
                build_zip_archive((f.filename, f.content.encode("utf-8")) for f in result.files)
            )
            destination = args.zip
        else:
            base_name = base_name_from_filename(args.input.name)
            destination = args.out or Path.cwd() / f"{base_name}_parts"
            result = _split(args, max_rows, DirectorySink(destination))
    except SplitterError as error:
        print(f"❌ {error.message(settings.locale)}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return 0

    print(f"✅ {result.message} → {destination}")
    for item in result.files:
        print(f"   {item.filename:<40} {item.rows:>8} rows")
    return 0


if __name__ == "__main__":
    sys.exit(main())
