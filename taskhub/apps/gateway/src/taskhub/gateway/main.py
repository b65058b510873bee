"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + 中间件 + 异常处理 + 路由注册。
"""

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from taskhub.core.config import get_db_path
from taskhub.core.store import create_store_group

from .errors import register_exception_handlers
from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import health, tasks

log = structlog.get_logger()


def get_cors_origins() -> list[str]:
    """TASKHUB_CORS_ORIGINS：逗号分隔的来源列表，默认 "*" """
    raw = os.environ.get("TASKHUB_CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 DB，关闭时清理连接"""
    db_path = get_db_path()
    store_group = await create_store_group(db_path)
    app.state.store_group = store_group
    log.info("store_initialized", db_path=db_path)

    yield

    if getattr(app.state, "store_group", None) is not None:
        await app.state.store_group.close()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="TaskHub Gateway",
        version="0.1.0",
        description="TaskHub 任务管理 API",
        lifespan=lifespan,
    )

    # 注册中间件（后注册的在外层：Logging -> Trace -> CORS -> 路由）
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    setup_logging()
    setup_logfire(app)

    register_exception_handlers(app)

    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口：uvicorn taskhub.gateway.main:app）
app = create_app()
