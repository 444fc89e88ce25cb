"""Exception handlers mapping engine errors to JSON responses."""

import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from csvninja.logging_config import get_logger
from csvninja.messages import render
from csvninja.splitter.errors import SplitterError

logger = get_logger(name=__name__)


def register_exception_handlers(app: FastAPI) -> None:
    settings = app.state.settings

    @app.exception_handler(SplitterError)
    async def splitter_error_handler(request: Request, error: SplitterError) -> JSONResponse:
        if error.status >= 500:
            logger.error("{} {} failed with {}: {}", request.method, request.url.path, error.code, error)
        else:
            logger.warning("{} {} rejected with {}: {}", request.method, request.url.path, error.code, error)

        payload = error.to_payload(settings.locale)
        if settings.environment == "development" and error.status >= 500 and error.__cause__ is not None:
            payload["stack"] = "".join(traceback.format_exception(error.__cause__))
        return JSONResponse(status_code=error.status, content=payload)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, error: Exception) -> JSONResponse:
        logger.exception("Unhandled error on {} {}", request.method, request.url.path)
        payload = {
            "error": render("server_error", settings.locale),
            "code": "INTERNAL_ERROR",
        }
        if not settings.is_production:
            payload["details"] = {"reason": str(error)}
        if settings.environment == "development":
            payload["stack"] = "".join(traceback.format_exception(error))
        return JSONResponse(status_code=500, content=payload)
