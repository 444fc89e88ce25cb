import math
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Awaitable, Callable, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from csvninja.logging_config import get_logger
from csvninja.splitter.errors import RateLimitedError

from .request_logging import client_host

logger = get_logger(name=__name__)

MAX_TRACKED_CLIENTS = 10_000


@dataclass
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_after: float


class FixedWindowRateLimiter:
    """Per-key request counter over fixed time windows.

    Counters live in process memory, so each worker process enforces its
    own budget. Windows are kept ordered by start time: expired ones are
    dropped from the front on every hit, and once ``max_keys`` clients are
    tracked the oldest window is evicted.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        max_keys: int = MAX_TRACKED_CLIENTS,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.max_keys = max_keys
        self._clock = clock
        self._lock = threading.Lock()
        self._windows: "OrderedDict[str, Tuple[float, int]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._windows)

    def hit(self, key: str) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            self._evict_expired(now)
            started, count = self._windows.get(key, (now, 0))
            count += 1
            self._windows[key] = (started, count)
            while len(self._windows) > self.max_keys:
                evicted, _ = self._windows.popitem(last=False)
                logger.debug("Rate limiter full, evicted window of {}", evicted)

        reset_after = max(0.0, self.window_seconds - (now - started))
        return RateLimitDecision(
            allowed=count <= self.max_requests,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - count),
            reset_after=reset_after,
        )

    def _evict_expired(self, now: float) -> None:
        while self._windows:
            key, (started, _) = next(iter(self._windows.items()))
            if now - started < self.window_seconds:
                break
            del self._windows[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject clients that exceed the request budget on ``path_prefix``."""

    def __init__(self, app, limiter: FixedWindowRateLimiter, path_prefix: str = "/api/", locale: str = "fr"):
        super().__init__(app)
        self.limiter = limiter
        self.path_prefix = path_prefix
        self.locale = locale

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        if not request.url.path.startswith(self.path_prefix) or request.method == "OPTIONS":
            return await call_next(request)

        client = client_host(request)
        decision = self.limiter.hit(client)
        headers = {
            "X-RateLimit-Limit": str(decision.limit),
            "X-RateLimit-Remaining": str(decision.remaining),
        }
        if not decision.allowed:
            logger.warning("Rate limit exceeded for client {} on {}", client, request.url.path)
            error = RateLimitedError()
            headers["Retry-After"] = str(math.ceil(decision.reset_after))
            return JSONResponse(status_code=error.status, content=error.to_payload(self.locale), headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response
