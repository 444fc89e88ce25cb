"""Health check and configured limits."""
from fastapi import APIRouter, Depends

from csvninja import __version__
from csvninja.settings import Settings

from .dependencies import get_app_settings
from .models import HealthResponse

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)):
    """Report liveness plus the limits clients must respect."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        storageMode=settings.storage_mode,
        maxUploadBytes=settings.max_upload_bytes,
        maxRowsPerFileLimit=settings.max_rows_per_file_limit,
        requestTimeoutSeconds=settings.request_timeout_seconds,
    )
