"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store / TaskService 实例

Store 实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from fastapi import Depends, Request
from taskhub.core.service import TaskService
from taskhub.core.store import StoreGroup


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_task_service(store_group: StoreGroup = Depends(get_store_group)) -> TaskService:
    """基于共享 TaskStore 构造 TaskService"""
    return TaskService(store_group.task_store)
