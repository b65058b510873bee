"""TaskService 单元测试

覆盖业务规则：
1. 创建：trim、必填标题、默认值、时间戳
2. 部分更新：空白标题忽略、description 覆盖、completed 总是覆盖
3. 完成状态切换与 updated_at 单调递增
4. 删除、筛选、搜索、统计
"""

from datetime import datetime, timedelta

import pytest
from taskhub.core.exceptions import InvalidArgumentError
from taskhub.core.models import TaskDraft, TaskPatch
from taskhub.core.service import TaskService


class TestCreate:
    """创建任务"""

    async def test_create_trims_and_defaults(self, service):
        task = await service.create_task("  Learn Spring Boot ", "  tutorial  ")

        restored = await service.get_task(task.id)
        assert restored is not None
        assert restored.title == "Learn Spring Boot"
        assert restored.description == "tutorial"
        assert restored.completed is False
        assert restored.created_at == restored.updated_at

    async def test_create_without_description(self, service):
        task = await service.create_task("No description")
        assert task.description is None

    @pytest.mark.parametrize("title", ["", "   ", None])
    async def test_blank_title_rejected(self, service, title):
        with pytest.raises(InvalidArgumentError):
            await service.create_task(title, "desc")
        assert await service.list_tasks() == []

    async def test_too_long_description_rejected(self, service):
        with pytest.raises(InvalidArgumentError):
            await service.create_task("ok", "x" * 501)
        assert await service.list_tasks() == []

    async def test_ids_are_unique(self, service):
        first = await service.create_task("one")
        second = await service.create_task("two")
        assert first.id != second.id
        assert len(first.id) == 26

    async def test_create_from_draft_keeps_completed(self, service):
        task = await service.create_task_from(
            TaskDraft(title="Setup Database", description="H2", completed=True)
        )
        assert task.completed is True

    async def test_create_from_draft_defaults_incomplete(self, service):
        task = await service.create_task_from(TaskDraft(title="Write Unit Tests"))
        assert task.completed is False

    async def test_create_from_draft_requires_title(self, service):
        with pytest.raises(InvalidArgumentError):
            await service.create_task_from(TaskDraft(title="  ", completed=True))


class TestUpdate:
    """部分更新"""

    async def test_update_missing_returns_none(self, service):
        await service.create_task("existing")
        assert await service.update_task("missing", TaskPatch(title="x")) is None
        assert [t.title for t in await service.list_tasks()] == ["existing"]

    async def test_update_replaces_fields(self, service, clock):
        task = await service.create_task("old", "old desc")
        clock.advance()

        updated = await service.update_task(
            task.id, TaskPatch(title=" new ", description=" new desc ", completed=True)
        )
        assert updated.title == "new"
        assert updated.description == "new desc"
        assert updated.completed is True
        assert updated.updated_at > task.updated_at
        assert updated.created_at == task.created_at
        assert updated.id == task.id

    async def test_blank_title_ignored_on_update(self, service, clock):
        """创建时空白标题报错，更新时空白标题被忽略"""
        task = await service.create_task("Keep me")
        clock.advance()

        updated = await service.update_task(task.id, TaskPatch(title="  ", completed=True))
        assert updated.title == "Keep me"
        assert updated.completed is True
        assert updated.updated_at > task.updated_at

    async def test_empty_description_replaces_existing(self, service):
        task = await service.create_task("t", "something")
        updated = await service.update_task(task.id, TaskPatch(description=""))
        assert updated.description == ""

    async def test_absent_description_left_untouched(self, service):
        task = await service.create_task("t", "something")
        updated = await service.update_task(task.id, TaskPatch(title="t2"))
        assert updated.description == "something"

    async def test_bare_patch_resets_completed(self, service):
        """不带 completed 的更新会把完成状态重置为 False"""
        task = await service.create_task_from(TaskDraft(title="done", completed=True))
        updated = await service.update_task(task.id, TaskPatch())
        assert updated.completed is False
        assert (await service.get_task(task.id)).completed is False

    async def test_too_long_title_rejected_before_write(self, service):
        task = await service.create_task("short")
        with pytest.raises(InvalidArgumentError):
            await service.update_task(task.id, TaskPatch(title="t" * 101, completed=True))
        restored = await service.get_task(task.id)
        assert restored.title == "short"
        assert restored.completed is False

    async def test_missing_task_reported_before_length_check(self, service):
        """任务不存在时返回 None，而不是字段超长错误"""
        patch = TaskPatch(title="t" * 101, description="d" * 501)
        assert await service.update_task("missing", patch) is None


class TestCompletion:
    """完成状态切换"""

    async def test_complete_then_incomplete(self, service, clock):
        task = await service.create_task("toggle")
        clock.advance()
        done = await service.mark_completed(task.id)
        clock.advance()
        undone = await service.mark_incomplete(task.id)

        assert done.completed is True
        assert undone.completed is False
        assert task.updated_at < done.updated_at < undone.updated_at

    async def test_updated_at_strictly_increases_with_frozen_clock(self, service):
        """时钟未前进时 updated_at 仍严格递增"""
        task = await service.create_task("frozen")
        done = await service.mark_completed(task.id)
        undone = await service.mark_incomplete(task.id)

        assert task.created_at <= task.updated_at < done.updated_at < undone.updated_at

    async def test_complete_already_completed_refreshes_timestamp(self, service, clock):
        task = await service.create_task_from(TaskDraft(title="done", completed=True))
        clock.advance()
        again = await service.mark_completed(task.id)
        assert again.completed is True
        assert again.updated_at > task.updated_at

    async def test_missing_task(self, service):
        assert await service.mark_completed("missing") is None
        assert await service.mark_incomplete("missing") is None


class TestDelete:
    async def test_delete_existing_then_again(self, service):
        task = await service.create_task("bye")
        assert await service.delete_task(task.id) is True
        assert await service.get_task(task.id) is None
        assert await service.delete_task(task.id) is False


class TestQueries:
    """列表、筛选、搜索"""

    async def test_list_newest_first(self, service, clock):
        t1 = await service.create_task("t1")
        clock.advance()
        t2 = await service.create_task("t2")
        clock.advance()
        t3 = await service.create_task("t3")

        assert [t.id for t in await service.list_tasks()] == [t3.id, t2.id, t1.id]

    async def test_list_by_completion(self, service):
        a = await service.create_task("a")
        b = await service.create_task("b")
        await service.mark_completed(b.id)

        assert [t.id for t in await service.list_by_completion(True)] == [b.id]
        assert [t.id for t in await service.list_by_completion(False)] == [a.id]

    async def test_grouped_listing(self, service, clock):
        old = await service.create_task("old")
        clock.advance()
        new = await service.create_task("new")
        await service.mark_completed(new.id)

        grouped = await service.list_grouped_by_completion()
        assert [t.id for t in grouped] == [old.id, new.id]

    @pytest.mark.parametrize("keyword", ["", None, "   "])
    async def test_blank_search_returns_empty(self, service, keyword):
        await service.create_task("anything")
        assert await service.search_tasks(keyword) == []

    async def test_search_is_case_insensitive_and_trimmed(self, service):
        await service.create_task("Learn Spring Boot")
        await service.create_task("Other", "nothing here")

        results = await service.search_tasks("  SPRING ")
        assert [t.title for t in results] == ["Learn Spring Boot"]

    async def test_field_specific_search(self, service):
        await service.create_task("Deploy", "run the pipeline")
        await service.create_task("Pipeline review")

        assert [t.title for t in await service.search_titles("pipeline")] == ["Pipeline review"]
        assert [t.title for t in await service.search_descriptions("pipeline")] == ["Deploy"]
        assert await service.search_titles("  ") == []


class TestStatistics:
    async def test_empty(self, service):
        stats = await service.get_statistics()
        assert (
            stats.total_tasks,
            stats.completed_tasks,
            stats.incomplete_tasks,
            stats.completion_percentage,
        ) == (0, 0, 0, 0.0)

    async def test_ten_tasks_six_completed(self, service):
        for i in range(10):
            task = await service.create_task(f"task {i}")
            if i < 6:
                await service.mark_completed(task.id)

        stats = await service.get_statistics()
        assert stats.total_tasks == 10
        assert stats.completed_tasks == 6
        assert stats.incomplete_tasks == 4
        assert stats.completion_percentage == pytest.approx(60.0)


class TestDefaultClock:
    async def test_real_clock_produces_utc_timestamps(self, task_store):
        service = TaskService(task_store)
        task = await service.create_task("real clock")
        assert task.created_at.tzinfo is not None
        assert task.created_at.utcoffset().total_seconds() == 0

    async def test_naive_clock_normalized_to_utc(self, task_store):
        """naive 时钟读数统一为 UTC，后续变更可与已存储时间比较"""
        service = TaskService(task_store, clock=lambda: datetime(2026, 1, 1, 9, 0))
        task = await service.create_task("naive clock")
        assert task.created_at.utcoffset() == timedelta(0)

        done = await service.mark_completed(task.id)
        assert done.updated_at > task.updated_at

        renamed = await service.update_task(task.id, TaskPatch(title="renamed"))
        assert renamed.updated_at > done.updated_at
        assert (await service.get_task(task.id)) == renamed
