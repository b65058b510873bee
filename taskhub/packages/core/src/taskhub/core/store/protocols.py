"""Store Protocol 接口定义

定义 TaskStore 的抽象接口，使用 Python Protocol 实现结构化子类型（duck typing）。
任何提供 get/put/delete/scan 能力的持久化引擎都可以实现此接口。
"""

from typing import Protocol

from ..models.task import Task


class TaskStore(Protocol):
    """Task 存储接口"""

    async def create_task(self, task: Task) -> None:
        """插入任务记录"""
        ...

    async def get_task(self, task_id: str) -> Task | None:
        """根据 id 查询任务"""
        ...

    async def update_task(self, task: Task) -> bool:
        """覆盖任务可变字段，返回记录是否存在"""
        ...

    async def delete_task(self, task_id: str) -> bool:
        """删除任务，返回记录是否存在"""
        ...

    async def list_tasks(self) -> list[Task]:
        """全部任务，按 created_at 倒序"""
        ...

    async def list_by_completed(self, completed: bool) -> list[Task]:
        """按完成状态筛选"""
        ...

    async def list_grouped_by_completion(self) -> list[Task]:
        """未完成在前，组内按 created_at 倒序"""
        ...

    async def search(
        self,
        keyword: str,
        fields: tuple[str, ...] = ("title", "description"),
    ) -> list[Task]:
        """大小写不敏感的子串搜索"""
        ...

    async def completion_counts(self) -> tuple[int, int]:
        """返回 (总数, 已完成数)"""
        ...
