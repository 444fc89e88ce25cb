"""Split API endpoints.

Endpoints:
- POST /split-csv - Split an uploaded CSV and return the parts
- POST /split-csv/archive - Split an uploaded CSV and stream the parts as one ZIP
- POST /download-zip - ZIP previously staged parts of a run (disk mode)
- GET /download/{run_id}/{filename} - Download one staged part (disk mode)
"""
import asyncio
import functools
import io
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import FileResponse, StreamingResponse

from csvninja.logging_config import get_logger
from csvninja.settings import Settings
from csvninja.splitter import MemorySink, RawUpload, parse_row_limit, split_csv
from csvninja.splitter.archive import archive_name, build_zip_archive
from csvninja.splitter.errors import (
    NoFileProvidedError,
    UnsupportedFileTypeError,
    UploadTooLargeError,
)
from csvninja.storage import ArtifactStore

from .dependencies import get_app_settings, get_optional_store, require_store
from .models import ErrorResponse, SplitFile, SplitResponse, ZipRequest

logger = get_logger(name=__name__)

router = APIRouter(tags=["Split"])

_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    408: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    413: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

CSV_CONTENT_TYPE = "text/csv"
ZIP_CONTENT_TYPE = "application/zip"


def _parse_has_header(raw: Optional[str]) -> bool:
    """Only the form value ``"true"`` declares a header row."""
    return raw is not None and raw.strip().lower() == "true"


def _is_csv(file: UploadFile) -> bool:
    return file.content_type == CSV_CONTENT_TYPE or (file.filename or "").lower().endswith(".csv")


async def _read_upload(file: Optional[UploadFile], settings: Settings) -> RawUpload:
    """Read the multipart file, enforcing presence, type and size."""
    if file is None or not file.filename:
        raise NoFileProvidedError()
    if not _is_csv(file):
        raise UnsupportedFileTypeError(details={"filename": file.filename, "content_type": file.content_type})

    content = await file.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise UploadTooLargeError(
            limit=settings.max_upload_bytes,
            details={"filename": file.filename, "limit_bytes": settings.max_upload_bytes},
        )
    return RawUpload(content=content, filename=file.filename)


async def _run_in_worker(func, *args, **kwargs):
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))


def _attachment(filename: str) -> Dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.post(
    "/split-csv",
    response_model=SplitResponse,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES,
)
async def split_csv_upload(
    request: Request,
    file: Optional[UploadFile] = File(None),
    max_rows_per_file: Optional[str] = Form(None, alias="maxRowsPerFile"),
    has_header: Optional[str] = Form(None, alias="hasHeader"),
    settings: Settings = Depends(get_app_settings),
    store: Optional[ArtifactStore] = Depends(get_optional_store),
):
    """
    Split an uploaded CSV into files of at most ``maxRowsPerFile`` data rows.

    - **file**: The CSV file (multipart)
    - **maxRowsPerFile**: Data rows per output file (1 to the configured limit)
    - **hasHeader**: `"true"` when the first row holds column names; anything else, or no value, means no header
    """
    upload = await _read_upload(file, settings)
    row_limit = parse_row_limit(max_rows_per_file)

    if store is not None:
        run_id, sink = store.open_run()
    else:
        run_id, sink = None, MemorySink()

    result = await _run_in_worker(
        split_csv, upload, row_limit, _parse_has_header(has_header), sink, settings, run_id=run_id
    )

    files = []
    for item in result.files:
        if run_id is not None:
            path = request.app.url_path_for("download_artifact", run_id=run_id, filename=item.filename)
            files.append(SplitFile(filename=item.filename, rows=item.rows, path=str(path)))
        else:
            files.append(SplitFile(filename=item.filename, rows=item.rows, content=item.content))

    return SplitResponse(
        message=result.message,
        files=files,
        totalRows=result.total_rows,
        maxRowsPerFile=result.max_rows_per_file,
        runId=run_id,
    )


@router.post("/split-csv/archive", responses=_ERROR_RESPONSES)
async def split_csv_archive(
    file: Optional[UploadFile] = File(None),
    max_rows_per_file: Optional[str] = Form(None, alias="maxRowsPerFile"),
    has_header: Optional[str] = Form(None, alias="hasHeader"),
    settings: Settings = Depends(get_app_settings),
):
    """Split an uploaded CSV and stream every part back as a single ZIP archive."""
    upload = await _read_upload(file, settings)
    row_limit = parse_row_limit(max_rows_per_file)

    result = await _run_in_worker(
        split_csv, upload, row_limit, _parse_has_header(has_header), MemorySink(), settings
    )
    payload = await _run_in_worker(
        build_zip_archive,
        [(item.filename, item.content.encode("utf-8")) for item in result.files],
    )

    logger.info("Streaming archive for {}: {} file(s), {} bytes", upload.filename, len(result.files), len(payload))
    return StreamingResponse(
        io.BytesIO(payload),
        media_type=ZIP_CONTENT_TYPE,
        headers=_attachment(archive_name(upload.base_name)),
    )


@router.post("/download-zip", responses=_ERROR_RESPONSES)
async def download_zip(
    request: ZipRequest,
    store: ArtifactStore = Depends(require_store),
):
    """Bundle previously generated parts of a run into one ZIP archive."""
    payload = await _run_in_worker(store.build_zip, request.runId, request.filenames)
    return StreamingResponse(
        io.BytesIO(payload),
        media_type=ZIP_CONTENT_TYPE,
        headers=_attachment(f"{request.runId}.zip"),
    )


@router.get("/download/{run_id}/{filename}", name="download_artifact", responses=_ERROR_RESPONSES)
async def download_artifact(
    run_id: str,
    filename: str,
    store: ArtifactStore = Depends(require_store),
):
    """Download one previously generated part."""
    path = store.resolve(run_id, filename)
    return FileResponse(path, media_type=CSV_CONTENT_TYPE, filename=filename)
