"""Dice pool and stress track models.

A dice pool is a count of dice of one size. Pools back the two stress
tracks (bloodied and rattled) and every condition. An empty pool
contributes no dice and raises no stress flag.
"""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from grimwild.core.exceptions import ValidationError
from grimwild.models.enums import DieSize


DiceCount = Annotated[int, Field(ge=0, description="Number of dice (non-negative)")]


class DicePool(BaseModel):
    """A sized pool of dice.

    Persisted as ``{"diceNum": int, "diceSize": "d6"}``; the snake_case
    names are accepted on input as well. Pools are immutable: the
    arithmetic helpers return new pools.

    Attributes:
        dice_num: Number of dice in the pool.
        dice_size: Die type of every die in the pool.

    Example:
        >>> pool = DicePool(diceNum=2)
        >>> pool.formula
        '2d6'
        >>> pool.remove(5).is_empty
        True
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    dice_num: DiceCount = Field(default=0, alias="diceNum")
    dice_size: DieSize = Field(default=DieSize.D6, alias="diceSize")

    @field_validator("dice_size", mode="before")
    @classmethod
    def coerce_numeric_size(cls, value: Any) -> Any:
        """Accept bare face counts (6, "6") as well as "d6" notation."""
        if isinstance(value, int) and not isinstance(value, bool):
            return f"d{value}"
        if isinstance(value, str) and value.isdigit():
            return f"d{value}"
        return value

    @property
    def is_empty(self) -> bool:
        """True when the pool holds no dice."""
        return self.dice_num == 0

    @property
    def formula(self) -> str:
        """Dice notation for the pool, or an empty string when empty."""
        if self.is_empty:
            return ""
        return f"{self.dice_num}{self.dice_size.value}"

    def add(self, count: int = 1) -> "DicePool":
        """Return a pool with ``count`` more dice."""
        if count < 0:
            raise ValidationError("Cannot add a negative number of dice", field_name="count", invalid_value=count)
        return self.model_copy(update={"dice_num": self.dice_num + count})

    def remove(self, count: int = 1) -> "DicePool":
        """Return a pool with up to ``count`` fewer dice, never below zero."""
        if count < 0:
            raise ValidationError("Cannot remove a negative number of dice", field_name="count", invalid_value=count)
        return self.model_copy(update={"dice_num": max(0, self.dice_num - count)})

    def cleared(self) -> "DicePool":
        """Return an empty pool of the same die size."""
        return self.model_copy(update={"dice_num": 0})


class StressTrack(BaseModel):
    """A stress track: a dice pool plus a player-acknowledged flag.

    ``marked`` is independent of the pool; a track is active only while its
    pool holds dice.

    Attributes:
        pool: The dice pool.
        marked: Whether the player has marked the track.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
    )

    pool: DicePool = Field(default_factory=DicePool)
    marked: bool = False

    @property
    def is_active(self) -> bool:
        """True while the pool holds at least one die."""
        return self.pool.dice_num > 0

    def set_dice(self, count: int) -> None:
        """Replace the pool's dice count, keeping its die size."""
        if count < 0:
            raise ValidationError("Dice count cannot be negative", field_name="count", invalid_value=count)
        self.pool = self.pool.model_copy(update={"dice_num": count})

    def mark(self) -> None:
        self.marked = True

    def unmark(self) -> None:
        self.marked = False


__all__ = [
    "DiceCount",
    "DicePool",
    "StressTrack",
]
