"""Rules constants for the Grimwild character engine.

This module defines the fixed numbers of the game's resource economy
and dice reading. Anything a table might reasonably change lives in
core.config instead.
"""

from __future__ import annotations

# =============================================================================
# Stats
# =============================================================================

STAT_MIN = 0
"""Lowest stat value."""

STAT_MAX = 3
"""Highest stat value."""

STAT_INITIAL = 1
"""Value every stat starts at on a new character sheet."""

UNKNOWN_STAT_ORDER = 100
"""Sort position for stat keys the rules config does not define."""

# =============================================================================
# Progression
# =============================================================================

FIRST_LEVEL_XP = 2
"""XP at which the first level threshold is reached."""

XP_DISPLAY_ROWS = 6
"""Number of rows in the XP pip grid; row i holds i + 2 pips."""

# =============================================================================
# Dice
# =============================================================================

STAT_DIE_SIZE = 6
"""Die size rolled for stat dice."""

THORN_DIE_SIZE = 8
"""Die size rolled for thorns."""

PERFECT_FACE = 6
"""Highest stat die face reading as a perfect result."""

MESSY_MIN_FACE = 4
"""Lowest stat die face reading as a messy result."""

THORN_CUT_MIN_FACE = 7
"""Lowest thorn face that cuts the result by one step."""

CRITICAL_SIX_COUNT = 2
"""Number of sixes among stat dice that reads as a critical."""

# =============================================================================
# Sheet defaults
# =============================================================================

BACKGROUND_COUNT = 2
"""Blank backgrounds seeded on a new character."""

WISES_PER_BACKGROUND = 3
"""Blank wises seeded on each background."""

TRAIT_POLARITIES = (True, True, False)
"""Default "are" polarity of the seeded traits and desires."""
