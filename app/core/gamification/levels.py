from __future__ import annotations

from typing import Tuple


# Upper bounds (exclusive) of levels 1..9; level N ends at LEVEL_THRESHOLDS[N - 1].
LEVEL_THRESHOLDS: Tuple[int, ...] = (
    80,
    200,
    400,
    800,
    1600,
    3200,
    6400,
    12800,
    25600,
)
OPEN_ENDED_STEP = 51200


def level_for_xp(xp: int) -> int:
    if xp < 0:
        raise ValueError(f"experience points must be non-negative, got {xp}")

    for index, upper_bound in enumerate(LEVEL_THRESHOLDS):
        if xp < upper_bound:
            return index + 1
    return len(LEVEL_THRESHOLDS) + 1 + (xp - LEVEL_THRESHOLDS[-1]) // OPEN_ENDED_STEP


def xp_for_next_level(level: int) -> int:
    """XP total at which `level + 1` begins."""
    if level < 1:
        raise ValueError(f"level must be at least 1, got {level}")

    if level <= len(LEVEL_THRESHOLDS):
        return LEVEL_THRESHOLDS[level - 1]
    return LEVEL_THRESHOLDS[-1] + (level - len(LEVEL_THRESHOLDS)) * OPEN_ENDED_STEP


def xp_for_level_start(level: int) -> int:
    if level <= 1:
        return 0
    return xp_for_next_level(level - 1)


def progress_percent(xp: int) -> int:
    level = level_for_xp(xp)
    start = xp_for_level_start(level)
    end = xp_for_next_level(level)
    raw = (xp - start) / (end - start) * 100
    return max(0, min(100, int(raw)))


__all__ = [
    "LEVEL_THRESHOLDS",
    "OPEN_ENDED_STEP",
    "level_for_xp",
    "xp_for_next_level",
    "xp_for_level_start",
    "progress_percent",
]
