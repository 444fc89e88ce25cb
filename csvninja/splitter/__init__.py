"""CSV splitting engine.

This package provides:
- The analyzer that decodes an uploaded buffer into an ordered table
- The partitioner and writer that turn the table into bounded CSV chunks
- A streaming partitioner for inputs too large to hold in memory
- Sinks that keep the chunks in memory or stage them on disk
"""
from .analyzer import analyze
from .deadline import Deadline
from .errors import SplitterError
from .models import (
    ArtifactSummary,
    OutputArtifact,
    ParsedTable,
    RawUpload,
    SplitResult,
    base_name_from_filename,
)
from .partitioner import MAX_ROWS_PER_FILE_LIMIT, parse_row_limit, partition
from .service import split_csv
from .sinks import ArtifactSink, DirectorySink, MemorySink
from .streaming import stream_partition

__all__ = [
    "analyze",
    "partition",
    "parse_row_limit",
    "split_csv",
    "stream_partition",
    "base_name_from_filename",
    "Deadline",
    "SplitterError",
    "ArtifactSink",
    "DirectorySink",
    "MemorySink",
    "ArtifactSummary",
    "OutputArtifact",
    "ParsedTable",
    "RawUpload",
    "SplitResult",
    "MAX_ROWS_PER_FILE_LIMIT",
]
