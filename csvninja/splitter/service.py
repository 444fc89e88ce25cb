"""Split service: the single entry point used by the API and the CLI.

This module orchestrates one split run:
1. Validate the requested row limit
2. Analyze the uploaded bytes
3. Partition the records into named chunks
4. Write every chunk into the sink, all or nothing
"""

from typing import Optional

from csvninja.logging_config import get_logger
from csvninja.messages import render
from csvninja.settings import Settings, get_settings

from .analyzer import analyze
from .deadline import Deadline
from .models import RawUpload, SplitResult
from .partitioner import partition, validate_row_limit
from .sinks import ArtifactSink

logger = get_logger(name=__name__)


def split_csv(
    upload: RawUpload,
    max_rows_per_file: int,
    has_header: bool,
    sink: ArtifactSink,
    settings: Optional[Settings] = None,
    *,
    deadline: Optional[Deadline] = None,
    run_id: Optional[str] = None,
) -> SplitResult:
    """Split an uploaded CSV into ``sink``.

    Args:
        upload: The uploaded bytes and their original filename.
        max_rows_per_file: Data rows per output file.
        has_header: Whether the first row holds column names.
        sink: Destination for the artifacts.
        settings: Limits and locale; the cached settings by default.
        deadline: Budget for the run; ``request_timeout_seconds`` by default.
        run_id: Identifier of the staged run, echoed in the result.

    Returns:
        SplitResult describing the files written to ``sink``.

    Raises:
        SplitterError: Any validation, parsing, serialization or timeout
            failure. The sink is aborted before the error propagates.
    """
    settings = settings or get_settings()
    deadline = deadline or Deadline(settings.request_timeout_seconds)
    limit = settings.max_rows_per_file_limit

    logger.info(
        "Splitting {} ({} bytes): max_rows_per_file={}, has_header={}",
        upload.filename, upload.size, max_rows_per_file, has_header,
    )

    with sink:
        validate_row_limit(max_rows_per_file, limit)
        table = analyze(upload.content, has_header, deadline=deadline)
        artifacts = partition(
            table,
            max_rows_per_file,
            upload.base_name,
            row_limit=limit,
            deadline=deadline,
        )
        for artifact in artifacts:
            deadline.check()
            sink.write(artifact)

    logger.info("Split complete for {}: {} file(s)", upload.filename, len(artifacts))
    return SplitResult(
        message=render("split_success", settings.locale, count=len(artifacts)),
        files=sink.summaries,
        total_rows=table.data_row_count,
        max_rows_per_file=max_rows_per_file,
        run_id=run_id,
    )
