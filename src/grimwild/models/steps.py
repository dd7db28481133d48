"""Step tracks: ordered boolean pips used for spark and story.

The track's value is the number of filled pips and is recomputed on every
read. Spending always clears the lowest-index filled pips first.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from grimwild.core.exceptions import ValidationError
from grimwild.core.logging import get_logger


logger = get_logger(__name__)


def _require_non_negative(count: int, field_name: str) -> None:
    if count < 0:
        raise ValidationError(
            f"{field_name} cannot be negative",
            field_name=field_name,
            invalid_value=count,
        )


class StepTrack(BaseModel):
    """An ordered sequence of pips, each filled or blank.

    Attributes:
        steps: Pip states in consumption order.

    Example:
        >>> spark = StepTrack(steps=[True, True, False])
        >>> spark.value
        2
        >>> spark.consume(1)
        1
        >>> spark.steps
        [False, True, False]
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="ignore",
    )

    steps: list[bool] = Field(default_factory=list, description="Pip states")

    @classmethod
    def blank(cls, length: int) -> "StepTrack":
        """Create a track of ``length`` blank pips."""
        _require_non_negative(length, "length")
        return cls(steps=[False] * length)

    @property
    def value(self) -> int:
        """Number of filled pips."""
        return sum(1 for step in self.steps if step)

    @property
    def length(self) -> int:
        return len(self.steps)

    def consume(self, count: int) -> int:
        """Clear up to ``count`` filled pips, lowest index first.

        Args:
            count: Pips to spend.

        Returns:
            How many pips were actually cleared; never more than ``count``
            and never more than were filled.
        """
        _require_non_negative(count, "count")
        remaining = count
        steps = list(self.steps)
        for index, filled in enumerate(steps):
            if remaining == 0:
                break
            if filled:
                steps[index] = False
                remaining -= 1
        self.steps = steps
        consumed = count - remaining
        if consumed < count:
            logger.debug("Step consumption clamped", requested=count, consumed=consumed)
        return consumed

    def restore(self, count: int) -> int:
        """Fill up to ``count`` blank pips, lowest index first.

        Returns:
            How many pips were actually filled.
        """
        _require_non_negative(count, "count")
        remaining = count
        steps = list(self.steps)
        for index, filled in enumerate(steps):
            if remaining == 0:
                break
            if not filled:
                steps[index] = True
                remaining -= 1
        self.steps = steps
        return count - remaining

    def toggle(self, index: int) -> bool:
        """Flip one pip and return its new state.

        Raises:
            IndexError: If ``index`` is outside the track.
        """
        if not 0 <= index < len(self.steps):
            raise IndexError(f"Step index {index} out of range for track of {len(self.steps)}")
        steps = list(self.steps)
        steps[index] = not steps[index]
        self.steps = steps
        return steps[index]

    def grow(self, count: int = 1) -> None:
        """Append ``count`` blank pips to the end of the track."""
        _require_non_negative(count, "count")
        self.steps = [*self.steps, *([False] * count)]


__all__ = ["StepTrack"]
