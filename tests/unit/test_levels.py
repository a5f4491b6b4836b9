"""Tests for level and rank classification."""

from __future__ import annotations

import pytest

from loro.rewards.levels import (
    LEVELS,
    MAX_LEVEL,
    RANKS,
    calculate_level,
    calculate_rank,
    level_progress,
    next_level_xp,
)


class TestLevelTable:
    def test_ranges_are_contiguous(self) -> None:
        for level in range(2, MAX_LEVEL + 1):
            assert LEVELS[level][0] == LEVELS[level - 1][1] + 1

    def test_first_levels(self) -> None:
        assert LEVELS[1] == (0, 499)
        assert LEVELS[2] == (500, 1249)
        assert LEVELS[3] == (1250, 2249)

    def test_rank_ranges_cover_every_level(self) -> None:
        covered = {lvl for low, high in RANKS.values() for lvl in range(low, high + 1)}
        assert covered == set(LEVELS)


class TestCalculateLevel:
    @pytest.mark.parametrize(
        ("xp", "expected"),
        [(0, 1), (100, 1), (499, 1), (500, 2), (1249, 2), (1250, 3)],
    )
    def test_boundaries(self, xp: int, expected: int) -> None:
        assert calculate_level(xp) == expected

    def test_caps_at_max_level(self) -> None:
        assert calculate_level(LEVELS[MAX_LEVEL][1] + 10_000) == MAX_LEVEL

    def test_negative_xp_is_level_one(self) -> None:
        assert calculate_level(-5) == 1


class TestCalculateRank:
    @pytest.mark.parametrize(
        ("level", "rank"),
        [(1, "ROOKIE"), (5, "ROOKIE"), (6, "BRONZE"), (16, "GOLD"), (30, "DIAMOND"), (31, "LEGEND")],
    )
    def test_rank_tiers(self, level: int, rank: str) -> None:
        assert calculate_rank(level) == rank

    def test_out_of_table_defaults_to_rookie(self) -> None:
        assert calculate_rank(0) == "ROOKIE"


class TestProgress:
    def test_next_level_xp(self) -> None:
        assert next_level_xp(1) == 500
        assert next_level_xp(MAX_LEVEL) == LEVELS[MAX_LEVEL][1] + 1000

    def test_progress_midway(self) -> None:
        assert level_progress(0, 1) == 0.0
        assert level_progress(499, 1) == 100.0
        assert 0 < level_progress(250, 1) < 100

    def test_progress_unknown_level(self) -> None:
        assert level_progress(100, 999) == 0.0
