"""Data model shared by the analyzer, the partitioner and the sinks."""

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional

Record = Dict[str, str]

FALLBACK_BASE_NAME = "split"


def base_name_from_filename(filename: str) -> str:
    """Strip directories and the last extension from an uploaded filename.

    Examples:
        base_name_from_filename("clients.csv") → "clients"
        base_name_from_filename("C:\\exports\\2024.clients.csv") → "2024.clients"
    """
    name = PurePosixPath((filename or "").replace("\\", "/")).name
    stem = PurePosixPath(name).stem.strip() if name else ""
    return stem or FALLBACK_BASE_NAME


def artifact_name(base_name: str, index: int) -> str:
    """Name of the 1-indexed chunk ``index``."""
    return f"{base_name}_part{index}.csv"


@dataclass(frozen=True)
class RawUpload:
    """Uploaded bytes plus the filename declared by the client."""

    content: bytes
    filename: str

    @property
    def base_name(self) -> str:
        return base_name_from_filename(self.filename)

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class ParsedTable:
    """Result of analyzing one CSV buffer.

    ``columns`` are the record keys. They equal ``header`` when the input
    declared one, and are the synthesized ``column_N`` names otherwise.
    ``total_rows`` counts every non-blank physical row, header included.
    """

    records: List[Record]
    columns: List[str]
    has_header: bool
    total_rows: int

    @property
    def header(self) -> Optional[List[str]]:
        return self.columns if self.has_header else None

    @property
    def data_row_count(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class OutputArtifact:
    """One serialized chunk."""

    filename: str
    content: str
    rows: int

    def to_bytes(self) -> bytes:
        return self.content.encode("utf-8")


@dataclass(frozen=True)
class ArtifactSummary:
    """What a sink keeps about an artifact once it has been written."""

    filename: str
    rows: int
    content: Optional[str] = None
    path: Optional[Path] = None


@dataclass
class SplitResult:
    """Outcome of one split run."""

    message: str
    files: List[ArtifactSummary] = field(default_factory=list)
    total_rows: int = 0
    max_rows_per_file: int = 0
    run_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase payload returned to API clients."""
        files = []
        for item in self.files:
            entry: Dict[str, Any] = {"filename": item.filename, "rows": item.rows}
            if item.content is not None:
                entry["content"] = item.content
            if item.path is not None:
                entry["path"] = str(item.path)
            files.append(entry)
        payload: Dict[str, Any] = {
            "success": True,
            "message": self.message,
            "files": files,
            "totalRows": self.total_rows,
            "maxRowsPerFile": self.max_rows_per_file,
        }
        if self.run_id is not None:
            payload["runId"] = self.run_id
        return payload
