"""CSV analyzer: decode an uploaded buffer into an ordered table of records.

Quoting follows the usual CSV rules (RFC 4180 style) and is parsed strictly,
so a stray character after a closing quote or an unterminated quote fails
the whole buffer instead of yielding a partial table.

When the caller declares no header, columns are synthesized as
``column_1 … column_N`` where N is the widest row; shorter rows are padded
with empty strings so every record exposes the same keys.
"""

import csv
import io
import sys
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from csvninja.logging_config import get_logger

from .deadline import Deadline
from .errors import ParseError, UnresolvableHeaderError
from .models import ParsedTable, Record

logger = get_logger(name=__name__)

# Rows parsed between two deadline checks
CHECK_EVERY = 500

SYNTHESIZED_COLUMN_PREFIX = "column_"

# Field length is bounded by the upload size, not by the csv module default
FIELD_SIZE_LIMIT = min(sys.maxsize, 2**31 - 1)
csv.field_size_limit(FIELD_SIZE_LIMIT)


def decode_buffer(buffer: bytes) -> str:
    """Decode upload bytes as UTF-8, dropping a leading byte-order mark."""
    try:
        return buffer.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ParseError("decode_error", details={"byte_offset": exc.start}) from exc


def iter_rows(lines: Iterable[str]) -> Iterator[Tuple[int, List[str]]]:
    """Yield ``(line_number, fields)`` for every non-blank CSV row.

    ``line_number`` is the physical line on which the row ends. ``lines``
    should come from a text stream opened with ``newline=""`` so quoted
    line breaks reach the parser untouched.
    """
    reader = csv.reader(lines, strict=True)
    try:
        for row in reader:
            if not row:
                continue
            yield reader.line_num, row
    except csv.Error as exc:
        raise ParseError(line=reader.line_num, reason=str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise ParseError("decode_error", details={"byte_offset": exc.start}) from exc


def synthesize_columns(width: int) -> List[str]:
    return [f"{SYNTHESIZED_COLUMN_PREFIX}{i}" for i in range(1, width + 1)]


def resolve_header(names: Sequence[str]) -> List[str]:
    """Validate the header row and return it as the column list."""
    columns = list(names)
    if not columns or all(not name.strip() for name in columns):
        raise UnresolvableHeaderError()

    seen = set()
    duplicates = []
    for name in columns:
        if name in seen and name not in duplicates:
            duplicates.append(name)
        seen.add(name)
    if duplicates:
        raise UnresolvableHeaderError(
            "header_duplicate_columns",
            columns=", ".join(duplicates),
            details={"duplicates": duplicates},
        )
    return columns


def pad_row(columns: Sequence[str], row: Sequence[str], line: int) -> List[str]:
    """Return ``row`` padded to the column count, rejecting wider rows."""
    width = len(columns)
    if len(row) > width:
        raise ParseError(
            "too_many_fields",
            line=line,
            found=len(row),
            expected=width,
            details={"line": line, "found": len(row), "expected": width},
        )
    if len(row) < width:
        return list(row) + [""] * (width - len(row))
    return list(row)


def build_record(columns: Sequence[str], row: Sequence[str], line: int) -> Record:
    return dict(zip(columns, pad_row(columns, row, line)))


def analyze(buffer: bytes, has_header: bool, deadline: Optional[Deadline] = None) -> ParsedTable:
    """Parse ``buffer`` into a :class:`ParsedTable`.

    Args:
        buffer: Raw upload bytes.
        has_header: Whether the first row holds column names.
        deadline: Optional budget checked while parsing.

    Returns:
        The complete table; nothing is returned on failure.

    Raises:
        ParseError: Undecodable bytes, malformed quoting or a row wider
            than the header.
        UnresolvableHeaderError: Blank or duplicate header columns.
        ProcessingTimeoutError: The deadline passed mid-parse.
    """
    deadline = deadline or Deadline.unbounded()
    text = decode_buffer(buffer)
    logger.debug("Analyzing CSV buffer: {} bytes, has_header={}", len(buffer), has_header)

    rows: List[Tuple[int, List[str]]] = []
    for line, row in iter_rows(io.StringIO(text, newline="")):
        if len(rows) % CHECK_EVERY == 0:
            deadline.check()
        rows.append((line, row))

    if has_header:
        table = _table_with_header(rows, deadline)
    else:
        table = _table_with_synthesized_header(rows, deadline)

    logger.info(
        "CSV analyzed: {} rows ({} data rows), {} columns",
        table.total_rows, table.data_row_count, len(table.columns),
    )
    return table


def _table_with_header(rows: List[Tuple[int, List[str]]], deadline: Deadline) -> ParsedTable:
    if not rows:
        return ParsedTable(records=[], columns=[], has_header=True, total_rows=0)

    columns = resolve_header(rows[0][1])
    records = []
    for index, (line, row) in enumerate(rows[1:]):
        if index % CHECK_EVERY == 0:
            deadline.check()
        records.append(build_record(columns, row, line))
    return ParsedTable(records=records, columns=columns, has_header=True, total_rows=len(rows))


def _table_with_synthesized_header(rows: List[Tuple[int, List[str]]], deadline: Deadline) -> ParsedTable:
    width = max((len(row) for _, row in rows), default=0)
    columns = synthesize_columns(width)
    records = []
    for index, (line, row) in enumerate(rows):
        if index % CHECK_EVERY == 0:
            deadline.check()
        records.append(build_record(columns, row, line))
    return ParsedTable(records=records, columns=columns, has_header=False, total_rows=len(rows))
