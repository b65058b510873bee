"""Task Domain Model

Task 是系统唯一的持久化实体。JSON 形式使用 camelCase 字段名：
{id, title, description, completed, createdAt, updatedAt}。
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from ..config import DESCRIPTION_MAX_LENGTH, TITLE_MAX_LENGTH
from ..exceptions import InvalidArgumentError

_CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def format_timestamp(value: datetime) -> str:
    """UTC + 固定微秒精度的 ISO-8601 文本，字典序与时间序一致"""
    return value.astimezone(UTC).isoformat(timespec="microseconds")


class Task(BaseModel):
    """Task 数据模型

    id 与 created_at 创建后不可变；updated_at 在每次成功变更时刷新。
    description 为 None 表示缺失，与空字符串不同。
    """

    model_config = _CAMEL_CONFIG

    id: str = Field(description="唯一标识，ULID 格式")
    title: str = Field(description="任务标题（已 trim，非空）")
    description: str | None = Field(default=None, description="任务描述（可缺失）")
    completed: bool = Field(default=False, description="是否已完成")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")

    @field_serializer("created_at", "updated_at", when_used="json")
    def serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)


class TaskDraft(BaseModel):
    """完整任务载荷 -- HTTP 创建入口使用

    载荷中的 id / 时间戳字段被忽略，由服务端分配。
    """

    model_config = _CAMEL_CONFIG

    title: str | None = Field(default=None, description="任务标题（必填）")
    description: str | None = Field(default=None, description="任务描述")
    completed: bool = Field(default=False, description="初始完成状态")


class TaskPatch(BaseModel):
    """任务更新载荷

    - title 为空白或缺失时保留原标题
    - description 出现即覆盖（包括空字符串）
    - completed 总是覆盖，缺失时为 False
    """

    model_config = _CAMEL_CONFIG

    title: str | None = Field(default=None, description="新标题")
    description: str | None = Field(default=None, description="新描述")
    completed: bool = Field(default=False, description="完成状态")


class TaskStatistics(BaseModel):
    """任务统计"""

    model_config = _CAMEL_CONFIG

    total_tasks: int = Field(description="任务总数")
    completed_tasks: int = Field(description="已完成数量")
    incomplete_tasks: int = Field(description="未完成数量")
    completion_percentage: float = Field(description="完成百分比（0-100）")

    @classmethod
    def from_counts(cls, total: int, completed: int) -> "TaskStatistics":
        """根据总数和完成数计算统计，total 为 0 时百分比为 0.0"""
        percentage = completed / total * 100 if total > 0 else 0.0
        return cls(
            total_tasks=total,
            completed_tasks=completed,
            incomplete_tasks=total - completed,
            completion_percentage=percentage,
        )


def normalize_title(title: str | None) -> str | None:
    """trim 标题

    Returns:
        trim 后的标题；None 或空白返回 None

    Raises:
        InvalidArgumentError: trim 后超过 TITLE_MAX_LENGTH
    """
    if title is None:
        return None
    trimmed = title.strip()
    if not trimmed:
        return None
    if len(trimmed) > TITLE_MAX_LENGTH:
        raise InvalidArgumentError(
            "title",
            f"Task title must not exceed {TITLE_MAX_LENGTH} characters",
        )
    return trimmed


def normalize_description(description: str | None) -> str | None:
    """trim 描述，None 保持为 None

    Raises:
        InvalidArgumentError: trim 后超过 DESCRIPTION_MAX_LENGTH
    """
    if description is None:
        return None
    trimmed = description.strip()
    if len(trimmed) > DESCRIPTION_MAX_LENGTH:
        raise InvalidArgumentError(
            "description",
            f"Task description must not exceed {DESCRIPTION_MAX_LENGTH} characters",
        )
    return trimmed
