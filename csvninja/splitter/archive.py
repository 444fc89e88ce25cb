"""ZIP bundling of split artifacts."""

import io
import zipfile
from pathlib import Path
from typing import Iterable, Tuple, Union

ArchiveEntry = Tuple[str, Union[bytes, Path]]


def build_zip_archive(entries: Iterable[ArchiveEntry]) -> bytes:
    """Build a deflated ZIP archive in memory.

    Each entry is ``(arcname, payload)`` where the payload is either the
    file bytes or the path of a file to copy in.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for arcname, payload in entries:
            if isinstance(payload, Path):
                archive.write(payload, arcname)
            else:
                archive.writestr(arcname, payload)
    return buffer.getvalue()


def archive_name(base_name: str) -> str:
    return f"{base_name}_split.zip"
