"""LoggingMiddleware -- 请求级日志

每个 HTTP 请求有一个 request_id，绑定到 structlog contextvars 并通过
X-Request-ID 响应头返回。客户端传入合法 ULID 时沿用，否则新生成。
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

REQUEST_ID_HEADER = "X-Request-ID"

# 探针请求频繁，降到 debug
_PROBE_PATHS = frozenset({"/health", "/ready"})


def resolve_request_id(incoming: str | None) -> str:
    """沿用客户端传入的 ULID，非法或缺失时生成新的"""
    if incoming:
        try:
            return str(ULID.from_str(incoming))
        except ValueError:
            pass
    return str(ULID())


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        path = request.url.path

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=path,
        )

        log = structlog.get_logger()
        is_probe = path in _PROBE_PATHS
        if not is_probe:
            await log.ainfo("request_started")
        started = time.perf_counter()

        response = await call_next(request)

        duration_ms = int((time.perf_counter() - started) * 1000)
        if response.status_code >= 500:
            await log.awarning(
                "request_completed",
                status_code=response.status_code,
                duration_ms=duration_ms,
            )
        elif is_probe:
            await log.adebug("request_completed", status_code=response.status_code)
        else:
            await log.ainfo(
                "request_completed",
                status_code=response.status_code,
                duration_ms=duration_ms,
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
