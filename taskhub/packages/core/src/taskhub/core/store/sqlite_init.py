"""SQLite 数据库初始化

PRAGMA 配置 + tasks 表 DDL + 索引创建 + 自定义 SQL 函数注册。
使用 aiosqlite 异步操作。
"""

import aiosqlite

from ..config import SQLITE_BUSY_TIMEOUT_MS

# tasks 表 DDL
# description 允许 NULL：缺失与空字符串语义不同
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id           TEXT PRIMARY KEY,
    title        TEXT NOT NULL,
    description  TEXT,
    completed    INTEGER NOT NULL DEFAULT 0,
    created_at   TEXT NOT NULL,
    updated_at   TEXT NOT NULL
);
"""

_TASKS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_completed ON tasks(completed);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at DESC);",
]


def _casefold(value: str | None) -> str | None:
    """SQLite lower() 只处理 ASCII，搜索使用 Python casefold"""
    if value is None:
        return None
    return value.casefold()


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 注册函数 + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute(f"PRAGMA busy_timeout = {SQLITE_BUSY_TIMEOUT_MS};")

    # 搜索依赖的大小写折叠函数（每个连接都需注册）
    await conn.create_function("casefold", 1, _casefold, deterministic=True)

    await conn.execute(_TASKS_DDL)
    for idx_sql in _TASKS_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
