"""Level and rank tables.

LEVELS maps a level to an inclusive [min_xp, max_xp] range. Ranges are
contiguous and widen by 250 XP per level, starting at level 1 = [0, 499].
RANKS maps a rank tier to an inclusive [low, high] level range.
"""

from __future__ import annotations

MAX_LEVEL = 50
_BASE_WIDTH = 500
_WIDTH_STEP = 250


def _build_levels() -> dict[int, tuple[int, int]]:
    levels: dict[int, tuple[int, int]] = {}
    floor = 0
    for level in range(1, MAX_LEVEL + 1):
        width = _BASE_WIDTH + _WIDTH_STEP * (level - 1)
        levels[level] = (floor, floor + width - 1)
        floor += width
    return levels


LEVELS: dict[int, tuple[int, int]] = _build_levels()

RANKS: dict[str, tuple[int, int]] = {
    "ROOKIE": (1, 5),
    "BRONZE": (6, 10),
    "SILVER": (11, 15),
    "GOLD": (16, 20),
    "PLATINUM": (21, 25),
    "DIAMOND": (26, 30),
    "LEGEND": (31, MAX_LEVEL),
}


def calculate_level(xp: int) -> int:
    """Classify a cumulative XP total into a level. XP past the table caps at MAX_LEVEL."""
    for level, (low, high) in LEVELS.items():
        if low <= xp <= high:
            return level
    return MAX_LEVEL if xp > LEVELS[MAX_LEVEL][1] else 1


def calculate_rank(level: int) -> str:
    for rank, (low, high) in RANKS.items():
        if low <= level <= high:
            return rank
    return "ROOKIE"


def next_level_xp(level: int) -> int:
    """XP needed to reach the next level, or current max + 1000 at the top."""
    nxt = LEVELS.get(level + 1)
    if nxt is not None:
        return nxt[0]
    current = LEVELS.get(level)
    return current[1] + 1000 if current else 5000


def level_progress(total_xp: int, level: int) -> float:
    """Percentage through the current level, to 2 decimal places."""
    bounds = LEVELS.get(level)
    if bounds is None:
        return 0.0
    low, high = bounds
    span = high - low
    if span <= 0:
        return 100.0
    return min(round((total_xp - low) / span * 100, 2), 100.0)
