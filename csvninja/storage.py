"""Staging area for split runs in disk storage mode.

Directory structure:

OUTPUT_DIR/
├── 3f9c0e…/            One directory per split run (random hex run id)
│   ├── clients_part1.csv
│   └── clients_part2.csv
└── a71d42…/

Runs are deleted once they are older than ARTIFACT_RETENTION_SECONDS,
whether or not the client downloaded them.
"""

import re
import shutil
import time
import uuid
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from csvninja.logging_config import get_logger
from csvninja.settings import Settings
from csvninja.splitter.archive import build_zip_archive
from csvninja.splitter.errors import (
    ArtifactNotFoundError,
    InvalidFilenameError,
    NoFileProvidedError,
)
from csvninja.splitter.sinks import DirectorySink

logger = get_logger(name=__name__)

_RUN_ID_RE = re.compile(r"^[0-9a-f]{32}$")


def _ensure_plain_name(name: str) -> None:
    if not name or name in (".", "..") or "/" in name or "\\" in name or "\x00" in name:
        raise InvalidFilenameError(filename=name, details={"filename": name})


class ArtifactStore:
    """Per-run directories under a root, with retention-based cleanup."""

    def __init__(self, root: Path, retention_seconds: int):
        self.root = Path(root)
        self.retention_seconds = retention_seconds

    @classmethod
    def from_settings(cls, settings: Settings) -> "ArtifactStore":
        settings.ensure_output_dir()
        return cls(settings.output_dir, settings.artifact_retention_seconds)

    # ── Runs ──────────────────────────────────────────────────────────

    def new_run(self) -> Tuple[str, Path]:
        """Allocate a fresh run id; ids are never reused across runs."""
        run_id = uuid.uuid4().hex
        return run_id, self.root / run_id

    def open_run(self) -> Tuple[str, DirectorySink]:
        """Allocate a run and return a sink writing into its directory."""
        run_id, run_dir = self.new_run()
        return run_id, DirectorySink(run_dir)

    def run_path(self, run_id: str) -> Path:
        if not _RUN_ID_RE.match(run_id or ""):
            raise InvalidFilenameError(filename=run_id, details={"run_id": run_id})
        return self.root / run_id

    # ── Retrieval ─────────────────────────────────────────────────────

    def resolve(self, run_id: str, filename: str) -> Path:
        """Path of one staged artifact.

        Raises:
            InvalidFilenameError: Run id or filename is not a plain name.
            ArtifactNotFoundError: Nothing staged under that name.
        """
        _ensure_plain_name(filename)
        path = self.run_path(run_id) / filename
        if not path.is_file():
            raise ArtifactNotFoundError(filename=filename, details={"run_id": run_id, "filename": filename})
        return path

    def list_artifacts(self, run_id: str) -> List[str]:
        run_dir = self.run_path(run_id)
        if not run_dir.is_dir():
            return []
        return sorted(p.name for p in run_dir.iterdir() if p.is_file() and p.suffix == ".csv")

    def build_zip(self, run_id: str, filenames: Sequence[str]) -> bytes:
        """Bundle the named artifacts of a run into one ZIP archive."""
        if not filenames:
            raise NoFileProvidedError("no_filenames")
        entries = [(name, self.resolve(run_id, name)) for name in dict.fromkeys(filenames)]
        logger.info("Building ZIP for run {} with {} file(s)", run_id, len(entries))
        return build_zip_archive(entries)

    # ── Cleanup ───────────────────────────────────────────────────────

    def purge_expired(self, now: Optional[float] = None) -> int:
        """Delete runs older than the retention window.

        Returns:
            Number of run directories removed.
        """
        if not self.root.exists():
            return 0

        now = time.time() if now is None else now
        cutoff = now - self.retention_seconds
        removed = 0
        for run_dir in self.root.iterdir():
            if not run_dir.is_dir() or not _RUN_ID_RE.match(run_dir.name):
                continue
            try:
                modified = run_dir.stat().st_mtime
            except FileNotFoundError:
                continue
            if modified <= cutoff:
                shutil.rmtree(run_dir, ignore_errors=True)
                removed += 1

        if removed:
            logger.info("Purged {} expired run(s) from {}", removed, self.root)
        return removed
