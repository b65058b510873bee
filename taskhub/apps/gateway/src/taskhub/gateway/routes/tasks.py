"""任务路由 -- /api/tasks

固定子路径（statistics / search / completed / incomplete）必须先于
/{task_id} 注册，否则会被当作 task_id 匹配。
"""

from fastapi import APIRouter, Depends, Query
from starlette.responses import Response
from taskhub.core.models import Task, TaskDraft, TaskPatch, TaskStatistics
from taskhub.core.service import TaskService

from ..deps import get_task_service
from ..errors import error_response, task_not_found

router = APIRouter(prefix="/api/tasks")


@router.get("", response_model=list[Task])
async def list_tasks(service: TaskService = Depends(get_task_service)):
    """全部任务，最新创建的在前"""
    return await service.list_tasks()


@router.post("", response_model=Task, status_code=201)
async def create_task(
    draft: TaskDraft,
    service: TaskService = Depends(get_task_service),
):
    """创建任务

    - 标题为空/空白或超长返回 400（InvalidArgumentError 处理器）
    - completed 缺省为 false
    """
    return await service.create_task_from(draft)


@router.get("/statistics", response_model=TaskStatistics)
async def get_statistics(service: TaskService = Depends(get_task_service)):
    """任务统计"""
    return await service.get_statistics()


@router.get("/search", response_model=list[Task])
async def search_tasks(
    keyword: str | None = Query(default=None, description="搜索关键字"),
    service: TaskService = Depends(get_task_service),
):
    """搜索任务

    - 缺少 keyword 参数返回 400
    - keyword 为空白返回空数组
    """
    if keyword is None:
        return error_response(400, "MISSING_KEYWORD", "Query parameter 'keyword' is required")
    return await service.search_tasks(keyword)


@router.get("/completed", response_model=list[Task])
async def list_completed_tasks(service: TaskService = Depends(get_task_service)):
    """已完成任务"""
    return await service.list_by_completion(True)


@router.get("/incomplete", response_model=list[Task])
async def list_incomplete_tasks(service: TaskService = Depends(get_task_service)):
    """未完成任务"""
    return await service.list_by_completion(False)


@router.get("/completed/{completed}", response_model=list[Task])
async def list_tasks_by_completion(
    completed: bool,
    service: TaskService = Depends(get_task_service),
):
    """按完成状态筛选"""
    return await service.list_by_completion(completed)


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: str, service: TaskService = Depends(get_task_service)):
    """查询任务详情"""
    task = await service.get_task(task_id)
    if task is None:
        return task_not_found(task_id)
    return task


@router.put("/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    patch: TaskPatch,
    service: TaskService = Depends(get_task_service),
):
    """更新任务

    载荷中缺少 completed 时会被重置为 false。
    """
    task = await service.update_task(task_id, patch)
    if task is None:
        return task_not_found(task_id)
    return task


@router.delete("/{task_id}", status_code=204)
async def delete_task(task_id: str, service: TaskService = Depends(get_task_service)):
    """删除任务：存在返回 204，否则 404"""
    if not await service.delete_task(task_id):
        return task_not_found(task_id)
    return Response(status_code=204)


@router.patch("/{task_id}/complete", response_model=Task)
async def mark_task_completed(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    """标记为已完成"""
    task = await service.mark_completed(task_id)
    if task is None:
        return task_not_found(task_id)
    return task


@router.patch("/{task_id}/incomplete", response_model=Task)
async def mark_task_incomplete(
    task_id: str,
    service: TaskService = Depends(get_task_service),
):
    """标记为未完成"""
    task = await service.mark_incomplete(task_id)
    if task is None:
        return task_not_found(task_id)
    return task
