"""CLI 入口模块 -- python -m taskhub.core <command>

支持的命令：
  stats                                     打印任务统计
  list [--completed|--incomplete|--grouped] 打印任务列表
  search <keyword>                          搜索任务
"""

import asyncio
import sys

from .config import get_db_path
from .models.task import Task

USAGE = """用法: python -m taskhub.core <command>
命令:
  stats                                     打印任务统计
  list [--completed|--incomplete|--grouped] 打印任务列表
  search <keyword>                          搜索任务"""

_LIST_FLAGS = {"--completed", "--incomplete", "--grouped"}


def main(argv: list[str] | None = None) -> None:
    """CLI 主入口"""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(USAGE)
        sys.exit(1)

    command, rest = args[0], args[1:]

    if command == "stats" and not rest:
        asyncio.run(print_statistics())
    elif command == "list" and (not rest or (len(rest) == 1 and rest[0] in _LIST_FLAGS)):
        asyncio.run(print_tasks(rest[0] if rest else None))
    elif command == "search" and len(rest) == 1:
        asyncio.run(print_search(rest[0]))
    else:
        print(f"未知命令: {' '.join(args)}")
        print(USAGE)
        sys.exit(1)


def format_task(task: Task) -> str:
    """单行展示任务"""
    mark = "x" if task.completed else " "
    line = f"[{mark}] {task.id}  {task.title}"
    if task.description:
        line += f" -- {task.description}"
    return line


async def print_statistics() -> None:
    from .service import TaskService
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())
    try:
        stats = await TaskService(store_group.task_store).get_statistics()
        print(f"总数: {stats.total_tasks}")
        print(f"已完成: {stats.completed_tasks}")
        print(f"未完成: {stats.incomplete_tasks}")
        print(f"完成率: {stats.completion_percentage:.2f}%")
    finally:
        await store_group.close()


async def print_tasks(flag: str | None) -> None:
    from .service import TaskService
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())
    try:
        service = TaskService(store_group.task_store)
        if flag == "--completed":
            tasks = await service.list_by_completion(True)
        elif flag == "--incomplete":
            tasks = await service.list_by_completion(False)
        elif flag == "--grouped":
            tasks = await service.list_grouped_by_completion()
        else:
            tasks = await service.list_tasks()
        for task in tasks:
            print(format_task(task))
    finally:
        await store_group.close()


async def print_search(keyword: str) -> None:
    from .service import TaskService
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())
    try:
        tasks = await TaskService(store_group.task_store).search_tasks(keyword)
        for task in tasks:
            print(format_task(task))
    finally:
        await store_group.close()


if __name__ == "__main__":
    main()
