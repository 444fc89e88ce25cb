"""Pluggable destinations for split artifacts.

A sink receives artifacts one at a time and is then either committed or
aborted. Used as a context manager it commits on a clean exit and aborts
when an exception escapes, so a failed run never leaves partial output.
"""

import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List

from csvninja.logging_config import get_logger

from .errors import SerializationError
from .models import ArtifactSummary, OutputArtifact

logger = get_logger(name=__name__)


class ArtifactSink(ABC):
    """Base class for artifact destinations."""

    def __init__(self) -> None:
        self.committed = False
        self.aborted = False
        self._summaries: List[ArtifactSummary] = []

    @property
    def summaries(self) -> List[ArtifactSummary]:
        return list(self._summaries)

    def write(self, artifact: OutputArtifact) -> None:
        if self.committed or self.aborted:
            raise RuntimeError("sink is closed")
        self._summaries.append(self._store(artifact))

    @abstractmethod
    def _store(self, artifact: OutputArtifact) -> ArtifactSummary:
        """Persist one artifact and describe where it went."""

    def commit(self) -> None:
        if not self.aborted:
            self.committed = True

    def abort(self) -> None:
        if self.committed or self.aborted:
            return
        self.aborted = True
        self._discard()
        self._summaries.clear()

    def _discard(self) -> None:
        pass

    def __enter__(self) -> "ArtifactSink":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is None:
            self.commit()
        else:
            self.abort()
        return False


class MemorySink(ArtifactSink):
    """Keep artifacts in memory for inline responses or archiving."""

    def _store(self, artifact: OutputArtifact) -> ArtifactSummary:
        return ArtifactSummary(filename=artifact.filename, rows=artifact.rows, content=artifact.content)


class DirectorySink(ArtifactSink):
    """Write artifacts as files under ``directory``.

    On abort every file this sink wrote is removed, and so is the directory
    when the sink created it. Files already present are left alone.
    """

    def __init__(self, directory: Path) -> None:
        super().__init__()
        self.directory = Path(directory)
        self._created_dir = not self.directory.exists()
        self.directory.mkdir(parents=True, exist_ok=True)
        self._written: List[Path] = []

    def _store(self, artifact: OutputArtifact) -> ArtifactSummary:
        path = self.directory / artifact.filename
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            tmp_path.write_bytes(artifact.to_bytes())
            tmp_path.replace(path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise SerializationError(
                filename=artifact.filename, details={"reason": str(exc)}
            ) from exc
        self._written.append(path)
        return ArtifactSummary(filename=artifact.filename, rows=artifact.rows, path=path)

    def _discard(self) -> None:
        if self._created_dir:
            shutil.rmtree(self.directory, ignore_errors=True)
            logger.info("Removed staged output directory {}", self.directory)
            return
        for path in self._written:
            path.unlink(missing_ok=True)
        logger.info("Removed {} staged file(s) from {}", len(self._written), self.directory)
