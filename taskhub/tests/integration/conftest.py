"""集成测试共享 fixture"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskhub.core.store import create_store_group


@pytest.fixture
def integration_db_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "sqlite" / "integration.db"
    monkeypatch.setenv("TASKHUB_DB_PATH", str(path))
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")
    return path


@pytest_asyncio.fixture
async def integration_app(integration_db_path: Path):
    """集成测试用 FastAPI app"""
    from taskhub.gateway.main import create_app

    app = create_app()
    store_group = await create_store_group(integration_db_path)
    app.state.store_group = store_group

    yield app

    await store_group.close()


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
