"""TaskStore SQLite 实现

每个写操作独立提交：要么完整生效，要么回滚后抛出 StoreUnavailableError。
"存储迭代顺序" 即插入顺序（rowid 升序）。
"""

import contextlib
from datetime import datetime

import aiosqlite
import structlog

from ..exceptions import StoreUnavailableError
from ..models.task import Task, format_timestamp

log = structlog.get_logger()

_COLUMNS = "id, title, description, completed, created_at, updated_at"

# 可搜索字段白名单（拼接进 SQL，禁止外部传入任意列名）
SEARCHABLE_FIELDS: tuple[str, ...] = ("title", "description")

# aiosqlite 在连接关闭后抛 ValueError，sqlite 自身错误为 aiosqlite.Error
_STORE_ERRORS = (aiosqlite.Error, ValueError)


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_task(self, task: Task) -> None:
        """插入任务记录"""
        await self._write(
            "create_task",
            f"INSERT INTO tasks ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
            (
                task.id,
                task.title,
                task.description,
                int(task.completed),
                format_timestamp(task.created_at),
                format_timestamp(task.updated_at),
            ),
        )

    async def get_task(self, task_id: str) -> Task | None:
        """根据 id 查询任务"""
        rows = await self._fetch(
            "get_task",
            f"SELECT {_COLUMNS} FROM tasks WHERE id = ?",
            (task_id,),
        )
        if not rows:
            return None
        return self._row_to_task(rows[0])

    async def update_task(self, task: Task) -> bool:
        """覆盖可变字段（title/description/completed/updated_at）

        Returns:
            True 如果记录存在并已更新
        """
        rowcount = await self._write(
            "update_task",
            """
            UPDATE tasks
            SET title = ?, description = ?, completed = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                task.title,
                task.description,
                int(task.completed),
                format_timestamp(task.updated_at),
                task.id,
            ),
        )
        return rowcount > 0

    async def delete_task(self, task_id: str) -> bool:
        """永久删除任务，返回记录是否存在"""
        rowcount = await self._write(
            "delete_task",
            "DELETE FROM tasks WHERE id = ?",
            (task_id,),
        )
        return rowcount > 0

    async def list_tasks(self) -> list[Task]:
        """全部任务，按 created_at 倒序；时间相同按插入顺序"""
        rows = await self._fetch(
            "list_tasks",
            f"SELECT {_COLUMNS} FROM tasks ORDER BY created_at DESC, rowid ASC",
        )
        return [self._row_to_task(row) for row in rows]

    async def list_by_completed(self, completed: bool) -> list[Task]:
        """按完成状态筛选，保持存储迭代顺序"""
        rows = await self._fetch(
            "list_by_completed",
            f"SELECT {_COLUMNS} FROM tasks WHERE completed = ? ORDER BY rowid ASC",
            (int(completed),),
        )
        return [self._row_to_task(row) for row in rows]

    async def list_grouped_by_completion(self) -> list[Task]:
        """未完成在前、已完成在后，组内按 created_at 倒序"""
        rows = await self._fetch(
            "list_grouped_by_completion",
            f"""
            SELECT {_COLUMNS} FROM tasks
            ORDER BY completed ASC, created_at DESC, rowid ASC
            """,
        )
        return [self._row_to_task(row) for row in rows]

    async def search(
        self,
        keyword: str,
        fields: tuple[str, ...] = SEARCHABLE_FIELDS,
    ) -> list[Task]:
        """大小写不敏感的子串匹配（任一字段命中即返回）

        Args:
            keyword: 已 trim 的非空关键字
            fields: 参与匹配的字段，必须属于 SEARCHABLE_FIELDS

        description 为 NULL 的任务不会在 description 上命中。
        """
        unknown = [f for f in fields if f not in SEARCHABLE_FIELDS]
        if unknown or not fields:
            raise ValueError(f"Unsupported search fields: {fields}")

        needle = keyword.casefold()
        where = " OR ".join(f"instr(casefold({f}), ?) > 0" for f in fields)
        rows = await self._fetch(
            "search",
            f"SELECT {_COLUMNS} FROM tasks WHERE {where} ORDER BY rowid ASC",
            tuple(needle for _ in fields),
        )
        return [self._row_to_task(row) for row in rows]

    async def completion_counts(self) -> tuple[int, int]:
        """单条查询返回 (总数, 已完成数)，两者来自同一快照"""
        rows = await self._fetch(
            "completion_counts",
            "SELECT COUNT(*), COALESCE(SUM(completed), 0) FROM tasks",
        )
        total, completed = rows[0][0], rows[0][1]
        return int(total), int(completed)

    async def _fetch(
        self,
        operation: str,
        sql: str,
        params: tuple = (),
    ) -> list:
        """执行只读查询"""
        try:
            cursor = await self._conn.execute(sql, params)
            return list(await cursor.fetchall())
        except _STORE_ERRORS as e:
            log.error(
                "task_store_error",
                operation=operation,
                error_type=type(e).__name__,
            )
            raise StoreUnavailableError(operation, e) from e

    async def _write(self, operation: str, sql: str, params: tuple) -> int:
        """执行单条写语句并提交，失败时回滚

        Returns:
            受影响行数
        """
        try:
            cursor = await self._conn.execute(sql, params)
            await self._conn.commit()
        except _STORE_ERRORS as e:
            # 连接已关闭时回滚本身也会失败，保留原始错误
            with contextlib.suppress(*_STORE_ERRORS):
                await self._conn.rollback()
            log.error(
                "task_store_error",
                operation=operation,
                error_type=type(e).__name__,
            )
            raise StoreUnavailableError(operation, e) from e
        return cursor.rowcount

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        return Task(
            id=row[0],
            title=row[1],
            description=row[2],
            completed=bool(row[3]),
            created_at=datetime.fromisoformat(row[4]),
            updated_at=datetime.fromisoformat(row[5]),
        )
