import time
import uuid
from typing import Awaitable, Callable, Iterable, Optional

from loguru import logger as loguru_logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"


def client_host(request: Request) -> str:
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request and tag the response with a request id.

    An incoming ``X-Request-ID`` is reused so a split can be followed from
    the browser into the logs. Requests on ``quiet_paths`` (health probes)
    are logged at DEBUG.
    """

    def __init__(
        self,
        app,
        logger: Optional[object] = None,
        quiet_paths: Iterable[str] = ("/api/health",),
    ):
        super().__init__(app)
        self.logger = (logger or loguru_logger).bind(component="http")
        self.quiet_paths = frozenset(quiet_paths)

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        log = self.logger.bind(request_id=request_id)
        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            log.exception(
                "{method} {path} -> unhandled error ({duration:.2f} ms) [client={client} id={rid}]",
                method=request.method,
                path=request.url.path,
                duration=(time.perf_counter() - start_time) * 1000,
                client=client_host(request),
                rid=request_id,
            )
            raise

        level = "DEBUG" if request.url.path in self.quiet_paths else "INFO"
        log.log(
            level,
            "{method} {path} -> {status} ({duration:.2f} ms, {size} bytes in) [client={client} id={rid}]",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration=(time.perf_counter() - start_time) * 1000,
            size=request.headers.get("content-length", "0"),
            client=client_host(request),
            rid=request_id,
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
