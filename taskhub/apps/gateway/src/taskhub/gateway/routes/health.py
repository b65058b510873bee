"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含 SQLite 连通性与磁盘空间。
"""

import shutil
from pathlib import Path

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse
from taskhub.core.config import get_db_path

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查 -- 验证核心依赖可用性

    检查项：
    1. sqlite: 数据库连通性
    2. disk_space_mb: 数据库所在磁盘剩余空间
    """
    checks: dict[str, str | int] = {}
    all_ok = True

    # 1. SQLite 连通性检查
    try:
        store_group = request.app.state.store_group
        cursor = await store_group.conn.execute("SELECT 1")
        await cursor.fetchone()
        checks["sqlite"] = "ok"
    except Exception as e:
        log.warning("readiness_sqlite_failed", error_type=type(e).__name__)
        checks["sqlite"] = "unavailable"
        all_ok = False

    # 2. 磁盘空间检查（数据库目录可能尚未创建，向上找到存在的目录）
    try:
        target = Path(get_db_path()).resolve().parent
        while not target.exists() and target != target.parent:
            target = target.parent
        disk_usage = shutil.disk_usage(target)
        checks["disk_space_mb"] = disk_usage.free // (1024 * 1024)
    except OSError:
        checks["disk_space_mb"] = 0
        all_ok = False

    status_code = 200 if all_ok else 503
    status_text = "ready" if all_ok else "not_ready"

    return JSONResponse(
        status_code=status_code,
        content={"status": status_text, "checks": checks},
    )
