"""Dice rolling and outcome reading.

Rolls go through the d20 library. A stat roll is two pools rolled side by
side: stat dice (d6, keep highest) and thorns (d8, all kept). Reading the
result:

* highest stat die 6 is perfect, 4-5 messy, 1-3 grim;
* two or more sixes make a critical;
* every thorn showing 7 or 8 cuts the result one step down
  (critical, perfect, messy, grim, disaster).
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import d20

from grimwild.core.constants import (
    CRITICAL_SIX_COUNT,
    MESSY_MIN_FACE,
    PERFECT_FACE,
    STAT_DIE_SIZE,
    THORN_CUT_MIN_FACE,
    THORN_DIE_SIZE,
)
from grimwild.core.exceptions import DiceRollError
from grimwild.core.logging import get_logger


logger = get_logger(__name__)


class RollOutcome(StrEnum):
    """Reading of a stat roll, best first."""

    CRITICAL = "critical"
    PERFECT = "perfect"
    MESSY = "messy"
    GRIM = "grim"
    DISASTER = "disaster"


OUTCOME_LADDER: tuple[RollOutcome, ...] = tuple(RollOutcome)


@dataclass(frozen=True)
class DiceExpression:
    """A rolled dice expression.

    Attributes:
        expression: The expression that was rolled.
        total: The total result of the roll.
        kept: Faces of dice that counted toward the total.
        rolled: Faces of every die rolled, including dropped ones.
        details: The library's rendering of the roll.
    """

    expression: str
    total: int
    kept: list[int] = field(default_factory=list)
    rolled: list[int] = field(default_factory=list)
    details: str = ""


@dataclass(frozen=True)
class StatRoll:
    """Both pools of a stat roll and their reading.

    Attributes:
        formula: Textual formula, e.g. ``{3d6kh1, 1d8}``.
        stat_dice: Every stat die face.
        thorn_dice: Every thorn die face.
        highest: Highest stat die, 0 when no stat dice were rolled.
        cuts: Thorns that cut the result.
        outcome: The final reading.
    """

    formula: str
    stat_dice: list[int]
    thorn_dice: list[int]
    highest: int
    cuts: int
    outcome: RollOutcome

    @property
    def is_critical(self) -> bool:
        return self.outcome == RollOutcome.CRITICAL


def build_formula(stat_dice: int, thorns: int) -> str:
    """Render the stat roll formula shown in roll messages."""
    return f"{{{stat_dice}d{STAT_DIE_SIZE}kh1, {thorns}d{THORN_DIE_SIZE}}}"


def read_outcome(stat_dice: list[int], thorn_dice: list[int]) -> RollOutcome:
    """Read a stat roll from its die faces.

    Args:
        stat_dice: Faces of the d6 pool.
        thorn_dice: Faces of the d8 thorn pool.

    Returns:
        The outcome after thorn cuts. No stat dice reads as grim before cuts.
    """
    highest = max(stat_dice, default=0)
    if stat_dice.count(PERFECT_FACE) >= CRITICAL_SIX_COUNT:
        base = RollOutcome.CRITICAL
    elif highest >= PERFECT_FACE:
        base = RollOutcome.PERFECT
    elif highest >= MESSY_MIN_FACE:
        base = RollOutcome.MESSY
    else:
        base = RollOutcome.GRIM

    cuts = sum(1 for face in thorn_dice if face >= THORN_CUT_MIN_FACE)
    index = min(OUTCOME_LADDER.index(base) + cuts, len(OUTCOME_LADDER) - 1)
    return OUTCOME_LADDER[index]


class DiceRoller:
    """Dice rolling backed by the d20 library.

    Example:
        >>> roller = DiceRoller(seed=7)
        >>> roller.roll("2d6kh1").total in range(1, 7)
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        if seed is not None:
            random.seed(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    def roll(self, expression: str) -> DiceExpression:
        """Roll a dice expression.

        Args:
            expression: Dice expression (e.g., '3d6kh1', '2d8').

        Returns:
            DiceExpression containing roll results.

        Raises:
            DiceRollError: If the expression is empty or invalid.
        """
        if not expression or not expression.strip():
            raise DiceRollError("Empty dice expression", expression=expression)

        try:
            result = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(f"Invalid dice expression: {exc}", expression=expression) from exc

        kept, rolled = self._extract_dice_values(result.expr)
        logger.debug("Dice rolled", expression=expression, total=result.total)
        return DiceExpression(
            expression=expression,
            total=result.total,
            kept=kept,
            rolled=rolled,
            details=str(result),
        )

    def _extract_dice_values(self, expr: Any) -> tuple[list[int], list[int]]:
        """Collect kept and all die faces from a d20 expression tree."""
        kept: list[int] = []
        rolled: list[int] = []

        def traverse(node: Any) -> None:
            if isinstance(node, d20.Dice):
                for die in node.values:
                    rolled.append(die.number)
                    if die.kept:
                        kept.append(die.number)
            elif hasattr(node, "children"):
                for child in node.children:
                    traverse(child)

        traverse(expr)
        return kept, rolled

    def roll_pool(self, count: int, size: int, *, keep_highest: bool = False) -> DiceExpression:
        """Roll ``count`` dice of one size.

        A zero count rolls nothing and totals 0.
        """
        if count < 0:
            raise DiceRollError("Dice count cannot be negative", details={"count": count})
        if count == 0:
            return DiceExpression(expression="", total=0)
        expression = f"{count}d{size}kh1" if keep_highest else f"{count}d{size}"
        return self.roll(expression)

    def roll_stat(self, stat_dice: int, thorns: int) -> StatRoll:
        """Roll a stat pool and a thorn pool and read the outcome."""
        stat_pool = self.roll_pool(stat_dice, STAT_DIE_SIZE, keep_highest=True)
        thorn_pool = self.roll_pool(thorns, THORN_DIE_SIZE)
        outcome = read_outcome(stat_pool.rolled, thorn_pool.rolled)
        cuts = sum(1 for face in thorn_pool.rolled if face >= THORN_CUT_MIN_FACE)

        stat_roll = StatRoll(
            formula=build_formula(stat_dice, thorns),
            stat_dice=stat_pool.rolled,
            thorn_dice=thorn_pool.rolled,
            highest=max(stat_pool.rolled, default=0),
            cuts=cuts,
            outcome=outcome,
        )
        logger.info(
            "Stat roll read",
            formula=stat_roll.formula,
            highest=stat_roll.highest,
            cuts=cuts,
            outcome=outcome.value,
        )
        return stat_roll


__all__ = [
    "RollOutcome",
    "DiceExpression",
    "StatRoll",
    "DiceRoller",
    "build_formula",
    "read_outcome",
]
