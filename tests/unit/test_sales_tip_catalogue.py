"""Tests for the sales tip catalogue."""

from __future__ import annotations

from datetime import date

from loro.sales_tips.catalogue import CATEGORIES, SALES_TIPS, get_tip, tip_for_date, tips_in_category


class TestCatalogue:
    def test_ids_unique(self) -> None:
        ids = [t.id for t in SALES_TIPS]
        assert len(ids) == len(set(ids))

    def test_categories_known(self) -> None:
        assert {t.category for t in SALES_TIPS} <= set(CATEGORIES)

    def test_every_category_has_tips(self) -> None:
        for category in CATEGORIES:
            assert tips_in_category(category)

    def test_get_tip(self) -> None:
        assert get_tip(1).title.startswith("Be a construction problem-solver")
        assert get_tip(9999) is None


class TestTipForDate:
    def test_same_day_same_tip(self) -> None:
        assert tip_for_date(date(2026, 5, 4)) == tip_for_date(date(2026, 5, 4))

    def test_consecutive_days_rotate(self) -> None:
        assert tip_for_date(date(2026, 5, 4)) != tip_for_date(date(2026, 5, 5))

    def test_index_from_day_of_year(self) -> None:
        day = date(2026, 1, 1)
        assert tip_for_date(day) == SALES_TIPS[1 % len(SALES_TIPS)]
