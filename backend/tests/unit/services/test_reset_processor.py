# backend/tests/unit/services/test_reset_processor.py
"""
Tests for ProcessedTaskRegistry and RecurrenceResetProcessor.
"""

import asyncio
from datetime import datetime, timezone

import pytest

from taskboard.models.reset_run_model import RunSummary
from taskboard.services.recurrence.reset_processor import (
    ProcessedTaskRegistry,
    RecurrenceResetProcessor,
)


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.mark.unit
class TestProcessedTaskRegistry:
    async def test_claim_once(self):
        registry = ProcessedTaskRegistry()

        assert await registry.claim_class("a") == set()
        assert await registry.claim_class("a") is None
        assert "a" in registry
        assert len(registry) == 1

    async def test_claims_mirrors_with_the_task(self):
        registry = ProcessedTaskRegistry()
        await registry.claim_class("c")

        claimed = await registry.claim_class("a", {"b", "c"})

        assert claimed == {"b"}
        assert "b" in registry
        assert await registry.claim_class("b", {"a"}) is None

    async def test_release(self):
        registry = ProcessedTaskRegistry()
        await registry.claim_class("a", {"b"})

        await registry.release("a", "b")

        assert "a" not in registry and "b" not in registry
        assert await registry.claim_class("a") == set()

    async def test_concurrent_claims_have_one_winner(self):
        registry = ProcessedTaskRegistry()

        results = await asyncio.gather(
            *(registry.claim_class("shared") for _ in range(10))
        )

        assert sum(result is not None for result in results) == 1


@pytest.mark.unit
class TestRecurrenceResetProcessor:
    async def test_process_task(self, task_store, calculator, fixed_now):
        task = task_store.add(
            id="a",
            is_completed=True,
            due_date=utc(2024, 3, 10, 12),
            recurrence_rule={"frequency": "weekly", "interval": 2},
            mirror_task_id="b",
        )
        task_store.add(id="b", is_completed=True)
        registry = ProcessedTaskRegistry()
        summary = RunSummary()

        reset = await RecurrenceResetProcessor(task_store, calculator).process_task(
            task, "America/Sao_Paulo", registry, summary, at=fixed_now
        )

        assert reset is True
        assert (summary.processed, summary.mirrors_updated) == (1, 1)
        assert "a" in registry and "b" in registry
        assert task_store.tasks["b"].due_date == utc(2024, 3, 29, 12)

    async def test_mirror_already_claimed_is_not_written_twice(self, task_store, calculator):
        task = task_store.add(
            id="a", is_completed=True, recurrence_rule={"frequency": "daily"}, mirror_task_id="b"
        )
        task_store.add(id="b", is_completed=True)
        registry = ProcessedTaskRegistry()
        await registry.claim_class("b")

        summary = RunSummary()
        await RecurrenceResetProcessor(task_store, calculator).process_task(
            task, "UTC", registry, summary
        )

        assert task_store.reset_calls == ["a"]
        assert summary.mirrors_updated == 0

    async def test_failed_primary_releases_claim(self, task_store, calculator):
        task = task_store.add(id="a", is_completed=True, recurrence_rule={"frequency": "daily"})
        task_store.fail_reset_ids.add("a")
        registry = ProcessedTaskRegistry()
        summary = RunSummary()

        reset = await RecurrenceResetProcessor(task_store, calculator).process_task(
            task, "UTC", registry, summary
        )

        assert reset is False
        assert summary.errors == 1
        assert "a" not in registry

    async def test_date_overflow_is_counted_not_raised(self, task_store, calculator):
        task = task_store.add(
            id="far",
            is_completed=True,
            due_date=utc(2024, 3, 10, 12),
            recurrence_rule={"frequency": "daily", "interval": 10**7},
        )
        registry = ProcessedTaskRegistry()
        summary = RunSummary()

        reset = await RecurrenceResetProcessor(task_store, calculator).process_task(
            task, "UTC", registry, summary
        )

        assert reset is False
        assert summary.errors == 1
        assert task_store.reset_calls == []
        assert "far" not in registry

    async def test_tasks_mirroring_each_other_converge_when_concurrent(
        self, task_store, calculator, fixed_now
    ):
        a = task_store.add(
            id="a",
            is_completed=True,
            due_date=utc(2024, 3, 10, 12),
            recurrence_rule={"frequency": "weekly", "interval": 2},
            mirror_task_id="b",
        )
        b = task_store.add(
            id="b",
            is_completed=True,
            due_date=utc(2024, 3, 10, 12),
            recurrence_rule={"frequency": "daily"},
            mirror_task_id="a",
        )
        original_reset = task_store.reset_task

        async def yielding_reset(task_id, due_date, require_completed=False):
            await asyncio.sleep(0)
            return await original_reset(task_id, due_date, require_completed)

        task_store.reset_task = yielding_reset
        processor = RecurrenceResetProcessor(task_store, calculator)
        registry = ProcessedTaskRegistry()
        summary = RunSummary()

        results = await asyncio.gather(
            processor.process_task(a, "UTC", registry, summary, at=fixed_now),
            processor.process_task(b, "UTC", registry, summary, at=fixed_now),
        )

        assert sorted(results) == [False, True]
        assert task_store.tasks["a"].due_date == task_store.tasks["b"].due_date
        assert (summary.processed, summary.mirrors_updated, summary.skipped) == (1, 1, 1)
