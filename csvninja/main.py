import asyncio
from contextlib import asynccontextmanager, suppress
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from csvninja import __version__
from csvninja.api.errors import register_exception_handlers
from csvninja.api.main import api_router
from csvninja.logging_config import configure_logging, get_logger
from csvninja.middleware import (
    FixedWindowRateLimiter,
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from csvninja.settings import Settings, get_settings
from csvninja.storage import ArtifactStore

logger = get_logger(name=__name__)


async def _sweep_expired_runs(store: ArtifactStore, interval_seconds: int) -> None:
    """Periodically delete staged runs past their retention window."""
    loop = asyncio.get_running_loop()
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await loop.run_in_executor(None, store.purge_expired)
        except OSError:
            logger.exception("Failed to purge expired runs under {}", store.root)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI application for ``settings`` (the cached settings by default)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    store = ArtifactStore.from_settings(settings) if settings.storage_mode == "disk" else None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        sweeper = None
        if store is not None:
            store.purge_expired()
            sweeper = asyncio.create_task(_sweep_expired_runs(store, settings.cleanup_interval_seconds))
        logger.info(
            "CSV Ninja {} started (environment={}, storage={})",
            __version__, settings.environment, settings.storage_mode,
        )
        try:
            yield
        finally:
            if sweeper is not None:
                sweeper.cancel()
                with suppress(asyncio.CancelledError):
                    await sweeper

    app = FastAPI(title="CSV Ninja", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    # Middleware added last runs first: CORS wraps everything.
    app.add_middleware(
        RateLimitMiddleware,
        limiter=FixedWindowRateLimiter(settings.rate_limit_requests, settings.rate_limit_window_seconds),
        locale=settings.locale,
    )
    app.add_middleware(SecurityHeadersMiddleware, enable_hsts=settings.is_production)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")
    return app


def run() -> None:
    load_dotenv()
    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.uvicorn_host, port=settings.uvicorn_port)


if __name__ == "__main__":
    run()
