"""错误响应 -- 统一 {"error": {"code", "message"}} 结构

异常到 HTTP 状态码的映射：
- InvalidArgumentError -> 400 INVALID_ARGUMENT
- RequestValidationError -> 400 VALIDATION_FAILED
- StoreUnavailableError -> 503 STORE_UNAVAILABLE
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse
from taskhub.core.exceptions import InvalidArgumentError, StoreUnavailableError

log = structlog.get_logger()


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """构建错误响应"""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


def task_not_found(task_id: str) -> JSONResponse:
    return error_response(404, "TASK_NOT_FOUND", f"Task with id {task_id} does not exist")


async def _invalid_argument_handler(request: Request, exc: InvalidArgumentError) -> JSONResponse:
    return error_response(400, "INVALID_ARGUMENT", str(exc))


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
    return error_response(400, "VALIDATION_FAILED", f"Validation failed: {', '.join(fields)}")


async def _store_unavailable_handler(
    request: Request, exc: StoreUnavailableError
) -> JSONResponse:
    log.error("store_unavailable", operation=exc.operation)
    # 不向客户端暴露底层异常细节
    return error_response(503, "STORE_UNAVAILABLE", "Task store is temporarily unavailable")


def register_exception_handlers(app: FastAPI) -> None:
    """注册全局异常处理器"""
    app.add_exception_handler(InvalidArgumentError, _invalid_argument_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StoreUnavailableError, _store_unavailable_handler)
