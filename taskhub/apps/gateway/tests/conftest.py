"""apps/gateway 测试配置 -- httpx AsyncClient + 临时 SQLite"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskhub.core.store import create_store_group


@pytest_asyncio.fixture
async def test_app(tmp_path: Path):
    """创建测试用 FastAPI app，手动初始化 lifespan 状态

    ASGITransport 不触发 lifespan，这里直接挂载 StoreGroup。
    """
    os.environ["TASKHUB_DB_PATH"] = str(tmp_path / "sqlite" / "test.db")
    os.environ["LOGFIRE_SEND_TO_LOGFIRE"] = "false"

    from taskhub.gateway.main import create_app

    app = create_app()
    store_group = await create_store_group(tmp_path / "sqlite" / "test.db")
    app.state.store_group = store_group

    yield app

    await store_group.close()
    for key in ["TASKHUB_DB_PATH", "LOGFIRE_SEND_TO_LOGFIRE"]:
        os.environ.pop(key, None)


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac
