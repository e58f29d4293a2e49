# backend/tests/unit/models/test_task_model.py
"""
Tests for Task and RecurrenceRule parsing of raw database values.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from taskboard.enums import JobState
from taskboard.models.reset_run_model import RunSummary
from taskboard.models.task_model import RecurrenceRule, Task


@pytest.mark.unit
class TestRecurrenceRuleParse:
    def test_frequency_rule(self):
        rule = RecurrenceRule.parse({"frequency": "WEEKLY", "interval": 2})
        assert rule.frequency == "weekly"
        assert rule.interval == 2
        assert rule.is_weekday_mode is False

    def test_weekday_rule(self):
        rule = RecurrenceRule.parse({"weekday": 3})
        assert rule.weekday == 3
        assert rule.is_weekday_mode is True

    def test_json_text(self):
        rule = RecurrenceRule.parse('{"frequency": "monthly", "interval": "4"}')
        assert (rule.frequency, rule.interval) == ("monthly", 4)

    def test_defaults(self):
        rule = RecurrenceRule.parse({})
        assert (rule.frequency, rule.interval, rule.weekday) == ("daily", 1, None)

    def test_null_frequency_means_daily(self):
        assert RecurrenceRule.parse({"frequency": None}).frequency == "daily"

    def test_unknown_keys_are_ignored(self):
        rule = RecurrenceRule.parse({"frequency": "daily", "weekdays": [1, 3]})
        assert rule is not None
        assert rule.weekday is None

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            [],
            "not json",
            "[1, 2]",
            42,
            {"weekday": 7},
            {"weekday": -1},
            {"weekday": True},
            {"weekday": "monday"},
        ],
    )
    def test_malformed_values_parse_to_none(self, raw):
        assert RecurrenceRule.parse(raw) is None

    @pytest.mark.parametrize(
        "interval, expected",
        [(0, 1), (-1, 1), ("x", 1), (True, 1), (None, 1), (2.0, 2), ("3", 3)],
    )
    def test_interval_floor(self, interval, expected):
        assert RecurrenceRule.parse({"interval": interval}).interval == expected


@pytest.mark.unit
class TestTaskModel:
    def test_from_database_row(self):
        task_id = uuid.uuid4()
        owner_id = uuid.uuid4()
        task = Task.model_validate(
            {
                "id": task_id,
                "owner_id": owner_id,
                "title": None,
                "due_date": datetime(2024, 3, 10, 12, 0),
                "is_completed": None,
                "recurrence_rule": {"frequency": "daily"},
                "mirror_task_id": None,
                "column_id": None,
                "tags": None,
            }
        )

        assert task.id == str(task_id)
        assert task.owner_id == str(owner_id)
        assert task.title == ""
        assert task.due_date == datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)
        assert task.is_completed is False
        assert task.recurrence_rule.frequency == "daily"
        assert task.tags == []

    def test_due_date_is_normalized_to_utc(self):
        sao_paulo_noon = datetime(2024, 3, 10, 12, 0, tzinfo=timezone(timedelta(hours=-3)))
        task = Task(id="t1", owner_id="u1", due_date=sao_paulo_noon)
        assert task.due_date == datetime(2024, 3, 10, 15, 0, tzinfo=timezone.utc)
        assert task.due_date.tzinfo == timezone.utc

    def test_malformed_rule_becomes_none(self):
        task = Task(id="t1", owner_id="u1", recurrence_rule=["daily"])
        assert task.recurrence_rule is None


@pytest.mark.unit
class TestRunSummary:
    def test_completed_summary(self):
        started = datetime(2024, 3, 15, 15, 0, tzinfo=timezone.utc)
        summary = RunSummary(
            status=JobState.COMPLETED,
            candidates=3,
            processed=2,
            mirrors_updated=1,
            errors=1,
            started_at=started,
            finished_at=started + timedelta(seconds=2),
        )

        assert summary.success is True
        assert summary.duration_seconds == 2.0
        assert "2 reset" in summary.message

        log_dict = summary.to_log_dict()
        assert log_dict["status"] == "completed"
        assert log_dict["trigger"] == "scheduled"
        assert log_dict["started_at"] == "2024-03-15T15:00:00Z"

    def test_failed_summary_message(self):
        summary = RunSummary(status=JobState.FAILED, error_message="deadline exceeded")
        assert summary.success is False
        assert summary.message.endswith("deadline exceeded")
        assert summary.duration_seconds is None

    def test_empty_run_message(self):
        summary = RunSummary(status=JobState.COMPLETED)
        assert summary.message == "No completed recurring tasks found"
