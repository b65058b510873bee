"""TaskService -- 任务创建/更新/删除/查询/统计业务逻辑

服务在构造时接收 TaskStore，自身负责：
1. 字段 trim 与长度/必填校验（校验在任何写入之前完成）
2. 分配 ULID 与时间戳（无 ORM 钩子）
3. 部分更新语义与统计计算

未找到记录返回 None / False，不抛异常。
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import structlog
from ulid import ULID

from .exceptions import InvalidArgumentError
from .models.task import (
    Task,
    TaskDraft,
    TaskPatch,
    TaskStatistics,
    normalize_description,
    normalize_title,
)
from .store.protocols import TaskStore

log = structlog.get_logger()

# 时钟未前进时 updated_at 的最小递增量
_MIN_TICK = timedelta(microseconds=1)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class TaskService:
    """任务业务服务"""

    def __init__(
        self,
        store: TaskStore,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or _utc_now

    async def create_task(self, title: str | None, description: str | None = None) -> Task:
        """按标题 + 描述创建任务

        Raises:
            InvalidArgumentError: 标题为空/空白，或字段超长
        """
        return await self._insert(title, description, completed=False)

    async def create_task_from(self, draft: TaskDraft) -> Task:
        """按完整任务载荷创建任务（HTTP 创建入口）

        completed 取载荷值，缺省为 False；id / 时间戳由服务分配。
        """
        return await self._insert(draft.title, draft.description, draft.completed)

    async def _insert(
        self,
        title: str | None,
        description: str | None,
        completed: bool,
    ) -> Task:
        clean_title = normalize_title(title)
        if clean_title is None:
            raise InvalidArgumentError("title", "Task title cannot be null or empty")
        clean_description = normalize_description(description)

        now = self._now()
        task = Task(
            id=str(ULID()),
            title=clean_title,
            description=clean_description,
            completed=completed,
            created_at=now,
            updated_at=now,
        )
        await self._store.create_task(task)
        log.info("task_created", task_id=task.id, completed=task.completed)
        return task

    async def get_task(self, task_id: str) -> Task | None:
        """查询任务详情"""
        return await self._store.get_task(task_id)

    async def update_task(self, task_id: str, patch: TaskPatch) -> Task | None:
        """部分更新任务

        - 任务不存在直接返回 None，字段长度在确认存在后、写入前校验
        - 空白或缺失的 title 被忽略（创建时则会报错）
        - 出现的 description 即覆盖，包括空字符串
        - completed 总是被 patch.completed 覆盖

        Returns:
            更新后的 Task，如果任务不存在返回 None
        """
        task = await self._store.get_task(task_id)
        if task is None:
            return None

        new_title = normalize_title(patch.title)
        new_description = normalize_description(patch.description)

        changes: dict[str, object] = {
            "completed": patch.completed,
            "updated_at": self._next_timestamp(task.updated_at),
        }
        if new_title is not None:
            changes["title"] = new_title
        if new_description is not None:
            changes["description"] = new_description

        updated = task.model_copy(update=changes)
        if not await self._store.update_task(updated):
            # 读取与写入之间被并发删除
            return None
        log.info("task_updated", task_id=task_id, completed=updated.completed)
        return updated

    async def delete_task(self, task_id: str) -> bool:
        """删除任务

        Returns:
            True 如果任务存在并已删除
        """
        deleted = await self._store.delete_task(task_id)
        if deleted:
            log.info("task_deleted", task_id=task_id)
        return deleted

    async def mark_completed(self, task_id: str) -> Task | None:
        """标记为已完成（已完成的任务也会刷新 updated_at）"""
        return await self._set_completed(task_id, True)

    async def mark_incomplete(self, task_id: str) -> Task | None:
        """标记为未完成"""
        return await self._set_completed(task_id, False)

    async def _set_completed(self, task_id: str, completed: bool) -> Task | None:
        task = await self._store.get_task(task_id)
        if task is None:
            return None

        updated = task.model_copy(
            update={
                "completed": completed,
                "updated_at": self._next_timestamp(task.updated_at),
            }
        )
        if not await self._store.update_task(updated):
            return None
        log.info("task_completion_changed", task_id=task_id, completed=completed)
        return updated

    async def list_tasks(self) -> list[Task]:
        """全部任务，最新创建的在前"""
        return await self._store.list_tasks()

    async def list_by_completion(self, completed: bool) -> list[Task]:
        """按完成状态筛选"""
        return await self._store.list_by_completed(completed)

    async def list_grouped_by_completion(self) -> list[Task]:
        """未完成在前、已完成在后，组内最新在前"""
        return await self._store.list_grouped_by_completion()

    async def search_tasks(self, keyword: str | None) -> list[Task]:
        """在标题或描述中搜索关键字（大小写不敏感）

        keyword 为 None 或空白时返回空列表。
        """
        return await self._search(keyword, ("title", "description"))

    async def search_titles(self, keyword: str | None) -> list[Task]:
        """仅在标题中搜索"""
        return await self._search(keyword, ("title",))

    async def search_descriptions(self, keyword: str | None) -> list[Task]:
        """仅在描述中搜索"""
        return await self._search(keyword, ("description",))

    async def _search(self, keyword: str | None, fields: tuple[str, ...]) -> list[Task]:
        if keyword is None or not keyword.strip():
            return []
        return await self._store.search(keyword.strip(), fields)

    async def get_statistics(self) -> TaskStatistics:
        """任务统计：总数、已完成、未完成、完成百分比"""
        total, completed = await self._store.completion_counts()
        return TaskStatistics.from_counts(total, completed)

    def _now(self) -> datetime:
        """时钟读数统一为 UTC；naive 值按本地时间解释"""
        return self._clock().astimezone(UTC)

    def _next_timestamp(self, previous: datetime) -> datetime:
        """取当前时间，保证严格晚于上一次 updated_at"""
        now = self._now()
        if now <= previous:
            return previous + _MIN_TICK
        return now
