"""Tests for XP category mapping, streaks and event translation."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from loro.rewards.events import EVENT_HANDLERS, XP_VALUES
from loro.rewards.service import category_for, consistency_streak


class TestCategoryFor:
    @pytest.mark.parametrize(
        ("source", "category"),
        [
            ("task", "tasks"),
            ("subtask", "tasks"),
            ("lead", "leads"),
            ("quotation", "sales"),
            ("sale", "sales"),
            ("check-in-client", "attendance"),
            ("collaboration", "collaboration"),
            ("login", "login"),
            ("Daily-Login", "login"),
            ("something-else", "other"),
            (None, "other"),
        ],
    )
    def test_mapping(self, source: str | None, category: str) -> None:
        assert category_for(source) == category


class TestConsistencyStreak:
    def test_no_activity_today(self) -> None:
        today = date(2026, 3, 10)
        assert consistency_streak({today - timedelta(days=1)}, today) == 0

    def test_consecutive_days(self) -> None:
        today = date(2026, 3, 10)
        days = {today - timedelta(days=i) for i in range(4)}
        assert consistency_streak(days, today) == 4

    def test_gap_breaks_streak(self) -> None:
        today = date(2026, 3, 10)
        days = {today, today - timedelta(days=1), today - timedelta(days=3)}
        assert consistency_streak(days, today) == 2

    def test_capped_by_window(self) -> None:
        today = date(2026, 3, 10)
        days = {today - timedelta(days=i) for i in range(60)}
        assert consistency_streak(days, today, window_days=30) == 30


class TestEventHandlers:
    def test_login_event(self) -> None:
        award = EVENT_HANDLERS["user.login"]({"user_id": 7})
        assert award.owner == 7
        assert award.action == "DAILY_LOGIN"
        assert award.amount == XP_VALUES["DAILY_LOGIN"]
        assert category_for(award.source.type) == "login"

    def test_task_completed_early(self) -> None:
        award = EVENT_HANDLERS["task.completed"]({"user_id": 3, "task_id": 9, "completed_early": True})
        assert award.action == "COMPLETE_TASK_EARLY"
        assert award.amount == XP_VALUES["COMPLETE_TASK_EARLY"]
        assert award.source.id == "9"

    def test_quotation_approved_counts_as_sales(self) -> None:
        award = EVENT_HANDLERS["quotation.approved"]({"user_id": 3, "quotation_id": 12})
        assert award.amount == XP_VALUES["QUOTATION_APPROVED"]
        assert category_for(award.source.type) == "sales"
