"""packages/core 测试配置 -- 核心层 fixture"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio


class FakeClock:
    """可手动推进的 UTC 时钟"""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float = 1.0) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


@pytest_asyncio.fixture
async def core_db(tmp_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """核心层已初始化数据库连接"""
    from taskhub.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(tmp_path / "core_test.db"))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def task_store(core_db):
    from taskhub.core.store.task_store import SqliteTaskStore

    return SqliteTaskStore(core_db)


@pytest.fixture
def service(task_store, clock):
    """使用 FakeClock 的 TaskService"""
    from taskhub.core.service import TaskService

    return TaskService(task_store, clock=clock)
