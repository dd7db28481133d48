"""The decision boundary between the roll resolver and whoever answers it.

The resolver never talks to a UI directly. It hands a RollSnapshot to a
RollDecisionInterface and awaits either a RollDecision or ``None``, which
means the player dismissed the prompt.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# =============================================================================
# Contract Types
# =============================================================================


class RollSnapshot(BaseModel):
    """What the player sees when asked how to roll.

    Attributes:
        spark: Spark available to spend.
        stat: The stat being rolled.
        dice_default: Default dice count (the stat's value).
        is_bloodied: Whether the bloodied pool holds dice.
        is_rattled: Whether the rattled pool holds dice.
        is_marked: Whether the stat is marked.
        suggested_thorns: Thorns the current state calls for.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    spark: int = Field(ge=0)
    stat: str
    dice_default: int = Field(ge=0, alias="diceDefault")
    is_bloodied: bool = Field(default=False, alias="isBloodied")
    is_rattled: bool = Field(default=False, alias="isRattled")
    is_marked: bool = Field(default=False, alias="isMarked")
    suggested_thorns: int = Field(default=0, ge=0, alias="suggestedThorns")


class Assister(BaseModel):
    """Someone helping with the roll."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    actor_id: str | None = Field(default=None, alias="actorId")


class RollDecision(BaseModel):
    """The player's answer to a roll prompt.

    Attributes:
        dice: Stat dice to roll.
        thorns: Thorn dice to roll.
        assisters: Characters helping.
        spark_used: Spark to spend on the roll.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    dice: int = Field(ge=0)
    thorns: int = Field(default=0, ge=0)
    assisters: list[Assister] = Field(default_factory=list)
    spark_used: int = Field(
        default=0,
        ge=0,
        alias="sparkUsed",
        validation_alias=AliasChoices("sparkUsed", "sparkSpent", "spark_used"),
    )


# =============================================================================
# Interface
# =============================================================================


@runtime_checkable
class RollDecisionInterface(Protocol):
    """Anything that can answer a roll prompt.

    ``request`` may wait indefinitely. Returning ``None`` cancels the roll.
    """

    async def request(self, snapshot: RollSnapshot) -> RollDecision | None:
        ...


class StaticDecision:
    """Always gives the same answer; ``None`` always cancels."""

    def __init__(self, decision: RollDecision | None) -> None:
        self.decision = decision
        self.requests: list[RollSnapshot] = []

    async def request(self, snapshot: RollSnapshot) -> RollDecision | None:
        self.requests.append(snapshot)
        return self.decision


class DefaultDecision:
    """Accepts the defaults: stat dice, suggested thorns, no spark."""

    async def request(self, snapshot: RollSnapshot) -> RollDecision | None:
        return RollDecision(dice=snapshot.dice_default, thorns=snapshot.suggested_thorns)


DecisionCallback = Callable[[RollSnapshot], "RollDecision | None | Awaitable[RollDecision | None]"]


class CallbackDecision:
    """Adapts a plain or async callable into a decision interface."""

    def __init__(self, callback: DecisionCallback) -> None:
        self._callback = callback

    async def request(self, snapshot: RollSnapshot) -> RollDecision | None:
        answer = self._callback(snapshot)
        if inspect.isawaitable(answer):
            answer = await answer
        return answer


__all__ = [
    "RollSnapshot",
    "Assister",
    "RollDecision",
    "RollDecisionInterface",
    "StaticDecision",
    "DefaultDecision",
    "CallbackDecision",
]
