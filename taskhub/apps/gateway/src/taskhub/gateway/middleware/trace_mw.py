"""TraceMiddleware -- 为单任务操作绑定 task_id

从 /api/tasks/{task_id}[/complete|/incomplete] 路径提取 task_id，
贯穿该请求内的服务层日志。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID


def is_task_id(segment: str) -> bool:
    """TaskService 分配的 id 均为 ULID；/api/tasks/search 等子路由不匹配"""
    try:
        ULID.from_str(segment)
    except ValueError:
        return False
    return True


class TraceMiddleware(BaseHTTPMiddleware):
    """任务级追踪中间件 -- 为任务操作绑定 task_id"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        parts = request.url.path.split("/")
        for i, part in enumerate(parts):
            if part == "tasks" and i + 1 < len(parts):
                task_id = parts[i + 1]
                if is_task_id(task_id):
                    structlog.contextvars.bind_contextvars(task_id=task_id)
                break

        return await call_next(request)
