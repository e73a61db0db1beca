import time
from collections import deque
from typing import Callable, Deque, Dict

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from packages.constants import (
    API_PREFIX,
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS,
)


def _client_ip(request: Request) -> str:
    # NOTE: X-Forwarded-For는 클라이언트가 임의로 보낼 수 있으므로 소켓 주소만 사용
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable):
        start_time = time.time()
        path = request.url.path

        try:
            response = await call_next(request)
            processing_time = round((time.time() - start_time) * 1000, 2)

            logger.info(
                {
                    "method": request.method,
                    "path": path,
                    "status_code": response.status_code,
                    "latency_ms": processing_time,
                    "user_agent": request.headers.get("user-agent", "unknown"),
                    "client_ip": _client_ip(request),
                }
            )
            return response

        except Exception as e:
            logger.error(
                {
                    "method": request.method,
                    "path": path,
                    "error": str(e),
                    "client_ip": _client_ip(request),
                }
            )
            return JSONResponse(
                {"detail": "Internal Server Error"},
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    API 경로(/api/...)에 대한 IP별 요청 제한 (sliding window)

    NOTE: 프로세스 메모리 기반이므로 워커가 여러 개면 워커별로 따로 집계됩니다.
    """

    def __init__(
        self,
        app,
        max_requests: int = RATE_LIMIT_MAX_REQUESTS,
        window_seconds: int = RATE_LIMIT_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self.hits: Dict[str, Deque[float]] = {}
        self.last_sweep = clock()

    def _prune(self, hits: Deque[float], now: float) -> None:
        while hits and now - hits[0] >= self.window_seconds:
            hits.popleft()

    def _sweep(self, now: float) -> None:
        """윈도우가 지난 IP 항목을 제거 (윈도우당 한 번)"""
        if now - self.last_sweep < self.window_seconds:
            return
        self.last_sweep = now

        for client_ip in list(self.hits):
            self._prune(self.hits[client_ip], now)
            if not self.hits[client_ip]:
                del self.hits[client_ip]

    def _is_limited(self, client_ip: str) -> bool:
        now = self.clock()
        self._sweep(now)

        hits = self.hits.setdefault(client_ip, deque())
        self._prune(hits, now)

        if len(hits) >= self.max_requests:
            return True

        hits.append(now)
        return False

    async def dispatch(self, request: Request, call_next: Callable):
        # NOTE: CORS 사전 요청(OPTIONS)은 집계하지 않습니다.
        if request.method == "OPTIONS" or not request.url.path.startswith(f"{API_PREFIX}/"):
            return await call_next(request)

        client_ip = _client_ip(request)
        if self._is_limited(client_ip):
            logger.warning(f"Rate limit exceeded for {client_ip} on {request.url.path}")
            return JSONResponse(
                {
                    "status_code": status.HTTP_429_TOO_MANY_REQUESTS,
                    "message": "Response Error!",
                    "data": "Too many requests from this IP, please try again later.",
                },
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            )

        return await call_next(request)
