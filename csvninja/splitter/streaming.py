"""Incremental parse-and-route partitioner.

Records are parsed one at a time and appended to the current chunk, which is
serialized and handed to the sink as soon as it is full. Only one chunk is
held in memory, so inputs larger than memory can be split from the CLI.

Output names and escaping match :func:`csvninja.splitter.partitioner.partition`.
Without a header, a first pass over the input finds the widest row so short
rows are padded exactly as the in-memory path pads them; the stream is then
rewound (or spooled to a temporary file when it cannot seek) and split.
"""

import tempfile
from contextlib import ExitStack
from dataclasses import dataclass
from typing import Iterable, List, Optional, TextIO, Tuple

from csvninja.logging_config import get_logger

from .analyzer import CHECK_EVERY, iter_rows, pad_row, resolve_header, synthesize_columns
from .deadline import Deadline
from .errors import EmptyOrUndersizedInputError
from .models import OutputArtifact, artifact_name
from .partitioner import MAX_ROWS_PER_FILE_LIMIT, validate_row_limit
from .sinks import ArtifactSink
from .writer import serialize_row

logger = get_logger(name=__name__)


@dataclass
class StreamStats:
    total_rows: int = 0
    data_rows: int = 0
    artifacts: int = 0


class _ChunkBuilder:
    def __init__(self, base_name: str, header_line: str, sink: ArtifactSink):
        self.base_name = base_name
        self.header_line = header_line
        self.sink = sink
        self.lines: List[str] = []
        self.index = 0

    def add(self, line: str) -> None:
        self.lines.append(line)

    def __len__(self) -> int:
        return len(self.lines)

    def flush(self) -> None:
        if not self.lines:
            return
        self.index += 1
        artifact = OutputArtifact(
            filename=artifact_name(self.base_name, self.index),
            content=self.header_line + "".join(self.lines),
            rows=len(self.lines),
        )
        self.sink.write(artifact)
        logger.debug("Emitted {} ({} rows)", artifact.filename, artifact.rows)
        self.lines = []


def _rewindable(lines: Iterable[str], stack: ExitStack) -> Tuple[TextIO, int]:
    """Return a seekable stream over ``lines`` and the position to rewind to.

    Seekable inputs (files opened by the CLI, ``StringIO``) are used as is.
    Anything else is spooled to a temporary file, so memory stays bounded.
    """
    seekable = getattr(lines, "seekable", None)
    if seekable is not None and seekable():
        return lines, lines.tell()
    spool = stack.enter_context(tempfile.TemporaryFile("w+", encoding="utf-8", newline=""))
    spool.writelines(lines)
    return spool, 0


def _widest_row(stream: TextIO, deadline: Deadline) -> int:
    width = 0
    for count, (_, row) in enumerate(iter_rows(stream)):
        if count % CHECK_EVERY == 0:
            deadline.check()
        width = max(width, len(row))
    return width


def stream_partition(
    lines: Iterable[str],
    has_header: bool,
    max_rows_per_file: int,
    base_name: str,
    sink: ArtifactSink,
    *,
    row_limit: int = MAX_ROWS_PER_FILE_LIMIT,
    deadline: Optional[Deadline] = None,
) -> StreamStats:
    """Split a CSV text stream into ``sink``, one chunk at a time.

    Args:
        lines: Text lines, ideally a file opened with ``newline=""``.
        has_header: Whether the first row holds column names.
        max_rows_per_file: Records per artifact.
        base_name: Prefix of the artifact names.
        sink: Destination; committed on success and aborted on any error.
        row_limit: Upper bound accepted for ``max_rows_per_file``.
        deadline: Optional budget checked while streaming.

    Returns:
        Row and artifact counts for the run.
    """
    deadline = deadline or Deadline.unbounded()
    validate_row_limit(max_rows_per_file, row_limit)
    stats = StreamStats()

    with sink, ExitStack() as stack:
        columns = None
        header_line = ""
        if has_header:
            rows = iter_rows(lines)
            first = next(rows, None)
            if first is None:
                raise EmptyOrUndersizedInputError("header_without_data", details={"total_rows": 0})
            stats.total_rows = 1
            columns = resolve_header(first[1])
            header_line = serialize_row(columns)
        else:
            source, start = _rewindable(lines, stack)
            columns = synthesize_columns(_widest_row(source, deadline))
            source.seek(start)
            rows = iter_rows(source)

        builder = _ChunkBuilder(base_name, header_line, sink)
        for line, row in rows:
            if stats.data_rows % CHECK_EVERY == 0:
                deadline.check()
            builder.add(serialize_row(pad_row(columns, row, line)))
            stats.total_rows += 1
            stats.data_rows += 1
            if len(builder) == max_rows_per_file:
                builder.flush()

        if stats.data_rows == 0:
            key = "header_without_data" if has_header else "no_data_rows"
            raise EmptyOrUndersizedInputError(key, details={"total_rows": stats.total_rows})
        builder.flush()
        stats.artifacts = builder.index

    logger.info(
        "Streamed {} data rows into {} file(s) of at most {} rows",
        stats.data_rows, stats.artifacts, max_rows_per_file,
    )
    return stats
