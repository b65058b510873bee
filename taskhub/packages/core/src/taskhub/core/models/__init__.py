"""TaskHub Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .task import (
    Task,
    TaskDraft,
    TaskPatch,
    TaskStatistics,
    normalize_description,
    normalize_title,
)

__all__ = [
    "Task",
    "TaskDraft",
    "TaskPatch",
    "TaskStatistics",
    "normalize_title",
    "normalize_description",
]
