"""Experience and level progression.

Levels follow a triangular curve: reaching level 2 takes 2 XP, and every
later level takes one more XP than the one before it, giving thresholds
at 2, 5, 9, 14, 20, 27, ... There is no level cap.

The XP pip grid shown on the sheet numbers pips 1..27 across six rows of
2..7 pips. That numbering is presentational only; the stored integer XP
value is authoritative.
"""

from __future__ import annotations

from grimwild.core.constants import FIRST_LEVEL_XP, XP_DISPLAY_ROWS
from grimwild.core.exceptions import ValidationError


def _check_xp(xp: int) -> None:
    if xp < 0:
        raise ValidationError("XP cannot be negative", field_name="xp", invalid_value=xp)


def level_for_xp(xp: int) -> int:
    """Determine character level from accumulated XP.

    Args:
        xp: Accumulated experience points (non-negative).

    Returns:
        The character level, starting at 1.

    Example:
        >>> [level_for_xp(xp) for xp in (0, 2, 5, 9, 14, 20)]
        [1, 2, 3, 4, 5, 6]
    """
    _check_xp(xp)
    if xp < FIRST_LEVEL_XP:
        return 1

    step = FIRST_LEVEL_XP
    threshold = FIRST_LEVEL_XP
    while xp >= threshold:
        step += 1
        threshold += step
    return step - 1


def xp_threshold(level: int) -> int:
    """Minimum XP needed to be at ``level``."""
    if level < 1:
        raise ValidationError("Level must be at least 1", field_name="level", invalid_value=level)
    if level == 1:
        return 0
    # 2 + 3 + ... + level
    return level * (level + 1) // 2 - 1


def xp_to_next_level(xp: int) -> int:
    """XP still needed to reach the next level."""
    return xp_threshold(level_for_xp(xp) + 1) - xp


def xp_step_rows(rows: int = XP_DISPLAY_ROWS) -> list[list[int]]:
    """Pip numbers for the sheet's XP grid, grouped into rows.

    Row ``i`` holds ``i + 2`` pips and numbering runs on across rows, so
    the default six rows yield ``[[1, 2], [3, 4, 5], ..., [..., 27]]``.
    """
    grid: list[list[int]] = []
    tally = 1
    for row in range(rows):
        grid.append(list(range(tally, tally + row + 2)))
        tally += row + 2
    return grid


__all__ = [
    "level_for_xp",
    "xp_threshold",
    "xp_to_next_level",
    "xp_step_rows",
]
