"""CSV partitioner: split an analyzed table into bounded, named chunks.

Chunk ``i`` (0-based) covers records ``[i*max, min((i+1)*max, total))`` and is
named ``{base_name}_part{i+1}.csv``. Concatenating the chunks in order gives
back the original data rows.
"""

import math
from typing import Any, List, Optional, Tuple

from csvninja.logging_config import get_logger

from .deadline import Deadline
from .errors import (
    EmptyOrUndersizedInputError,
    InvalidRowLimitError,
    UnresolvableHeaderError,
)
from .models import OutputArtifact, ParsedTable, artifact_name
from .writer import serialize_chunk

logger = get_logger(name=__name__)

MAX_ROWS_PER_FILE_LIMIT = 10_000


def parse_row_limit(raw: Any) -> int:
    """Coerce a form or CLI value to an integer row limit.

    Only the type is checked here; bounds are enforced by
    :func:`validate_row_limit`.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        raise InvalidRowLimitError("row_limit_too_small", details={"value": raw})
    if isinstance(raw, bool):
        raise InvalidRowLimitError("row_limit_not_integer", details={"value": raw})
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except ValueError as exc:
        raise InvalidRowLimitError("row_limit_not_integer", details={"value": str(raw)}) from exc


def validate_row_limit(max_rows_per_file: int, limit: int = MAX_ROWS_PER_FILE_LIMIT) -> None:
    if isinstance(max_rows_per_file, bool) or not isinstance(max_rows_per_file, int):
        raise InvalidRowLimitError("row_limit_not_integer", details={"value": repr(max_rows_per_file)})
    if max_rows_per_file < 1:
        raise InvalidRowLimitError("row_limit_too_small", details={"value": max_rows_per_file})
    if max_rows_per_file > limit:
        raise InvalidRowLimitError(
            "row_limit_too_large",
            limit=limit,
            details={"value": max_rows_per_file, "limit": limit},
        )


def validate_table(table: ParsedTable) -> None:
    """Reject tables that cannot produce at least one well-formed chunk."""
    if table.has_header and table.total_rows < 2:
        raise EmptyOrUndersizedInputError(
            "header_without_data", details={"total_rows": table.total_rows}
        )
    if table.data_row_count < 1:
        raise EmptyOrUndersizedInputError("no_data_rows", details={"total_rows": table.total_rows})
    if not table.columns:
        raise UnresolvableHeaderError()


def chunk_bounds(total: int, max_rows_per_file: int) -> List[Tuple[int, int]]:
    """Half-open record ranges, one per artifact."""
    count = math.ceil(total / max_rows_per_file)
    return [
        (i * max_rows_per_file, min((i + 1) * max_rows_per_file, total))
        for i in range(count)
    ]


def partition(
    table: ParsedTable,
    max_rows_per_file: int,
    base_name: str,
    *,
    row_limit: int = MAX_ROWS_PER_FILE_LIMIT,
    deadline: Optional[Deadline] = None,
) -> List[OutputArtifact]:
    """Split ``table`` into serialized artifacts.

    All preconditions are checked before the first chunk is built, and the
    list is only returned once every chunk serialized, so callers never see
    a partial result.

    Raises:
        InvalidRowLimitError: ``max_rows_per_file`` is not in ``[1, row_limit]``.
        EmptyOrUndersizedInputError: No data rows to split.
        UnresolvableHeaderError: No usable column list.
        SerializationError: A chunk could not be serialized.
        ProcessingTimeoutError: The deadline passed between chunks.
    """
    deadline = deadline or Deadline.unbounded()
    validate_row_limit(max_rows_per_file, row_limit)
    validate_table(table)

    bounds = chunk_bounds(table.data_row_count, max_rows_per_file)
    logger.info(
        "Partitioning {} data rows into {} file(s) of at most {} rows",
        table.data_row_count, len(bounds), max_rows_per_file,
    )

    artifacts: List[OutputArtifact] = []
    for index, (start, end) in enumerate(bounds, start=1):
        deadline.check()
        filename = artifact_name(base_name, index)
        content = serialize_chunk(
            table.columns,
            table.records[start:end],
            include_header=table.has_header,
            filename=filename,
        )
        artifacts.append(OutputArtifact(filename=filename, content=content, rows=end - start))
        logger.debug("Built {} ({} rows)", filename, end - start)

    return artifacts
