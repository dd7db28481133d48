"""Stat roll resolution.

The resolver turns "roll stat X" into a resolved roll:

1. Check the stat exists on the character (otherwise a no-op that signals
   an invalid stat).
2. Build a snapshot of spark, default dice and stress state.
3. Await the player's decision. This is the only suspension point; the
   character is not touched while waiting.
4. On cancellation, stop with no mutation at all.
5. Spend spark and persist the spark track *before* rolling. Spending is
   a decision, not a consequence of success, so it stands even if the
   roll or message fails afterwards. If the store rejects the write the
   character keeps its unspent track.
6. Roll stat dice (d6, keep highest) and thorns (d8) and post the result.

The two writes (spark track, then roll message) are not atomic. If the
message fails after spark was written, the spark stays spent and the
caller may retry posting.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from grimwild.core.config import GameSettings, RulesConfig, default_rules
from grimwild.core.exceptions import CollaboratorError, InvalidStatError, RollResolutionError
from grimwild.core.logging import get_logger
from grimwild.engine.collaborators import CharacterStore, MessagePoster, RollMessage
from grimwild.engine.decisions import RollDecision, RollDecisionInterface, RollSnapshot
from grimwild.engine.dice import DiceRoller, StatRoll, build_formula
from grimwild.models.character import Character


logger = get_logger(__name__)


# =============================================================================
# States and Results
# =============================================================================


class ResolverState(StrEnum):
    """Where a single roll is in its lifecycle."""

    IDLE = "idle"
    AWAITING_DECISION = "awaiting_decision"
    CANCELLED = "cancelled"
    RESOLVED = "resolved"


ALLOWED_TRANSITIONS: dict[ResolverState, frozenset[ResolverState]] = {
    ResolverState.IDLE: frozenset({ResolverState.AWAITING_DECISION}),
    ResolverState.AWAITING_DECISION: frozenset({ResolverState.CANCELLED, ResolverState.RESOLVED}),
    ResolverState.CANCELLED: frozenset(),
    ResolverState.RESOLVED: frozenset(),
}


class RollStatus(StrEnum):
    """How a roll request ended."""

    RESOLVED = "resolved"
    CANCELLED = "cancelled"
    INVALID_STAT = "invalid_stat"


@dataclass(frozen=True)
class RollRequest:
    """Everything the dice roller and the message need.

    Attributes:
        stat: Stat being rolled.
        stat_dice_count: d6 stat dice.
        thorns_count: d8 thorn dice.
        roll_data: Character roll data plus the decision's fields.
    """

    stat: str
    stat_dice_count: int
    thorns_count: int
    roll_data: dict[str, Any] = field(default_factory=dict)

    @property
    def formula(self) -> str:
        return build_formula(self.stat_dice_count, self.thorns_count)


@dataclass
class RollResolution:
    """Outcome of one roll request.

    Attributes:
        status: How the request ended.
        state: Final resolver state.
        stat: Requested stat key.
        snapshot: What the player was shown, if it got that far.
        decision: The player's answer, if any.
        request: The roll request built from the decision.
        roll: The rolled dice and their reading.
        spark_spent: Spark pips actually cleared.
        error: The invalid-stat signal, when status is INVALID_STAT.
    """

    status: RollStatus
    state: ResolverState
    stat: str
    snapshot: RollSnapshot | None = None
    decision: RollDecision | None = None
    request: RollRequest | None = None
    roll: StatRoll | None = None
    spark_spent: int = 0
    error: InvalidStatError | None = None

    @property
    def resolved(self) -> bool:
        return self.status == RollStatus.RESOLVED

    def raise_for_status(self) -> None:
        """Raise the invalid-stat signal as an exception, if there is one.

        Cancellation is a normal outcome and never raises.
        """
        if self.error is not None:
            raise self.error


def _transition(current: ResolverState, target: ResolverState) -> ResolverState:
    if target not in ALLOWED_TRANSITIONS[current]:
        raise RollResolutionError(
            f"Cannot move from {current.value} to {target.value}",
            state=current.value,
        )
    return target


# =============================================================================
# Resolver
# =============================================================================


class RollResolver:
    """Resolves stat rolls for characters.

    Example:
        >>> resolver = RollResolver(default_rules(), store, poster)
        >>> resolution = await resolver.roll_stat(hero, "bra", DefaultDecision())
        >>> resolution.roll.outcome
        <RollOutcome.MESSY: 'messy'>
    """

    def __init__(
        self,
        rules: RulesConfig | None,
        store: CharacterStore,
        poster: MessagePoster,
        *,
        roller: DiceRoller | None = None,
        settings: GameSettings | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            rules: Stat configuration; defaults to the standard four stats.
            store: Persists spark spending.
            poster: Posts resolved rolls.
            roller: Dice roller; a fresh unseeded one by default.
            settings: Roll mode and decision timeout.
        """
        self.rules = rules or default_rules()
        self.store = store
        self.poster = poster
        self.roller = roller or DiceRoller()
        self.settings = settings or GameSettings()

    # =========================================================================
    # Snapshot
    # =========================================================================

    def suggested_thorns(self, character: Character, stat_key: str) -> int:
        """Thorns the character's state calls for on this stat.

        One for a marked stat, and one when the stress track tied to the
        stat holds dice.
        """
        thorns = 1 if character.stats[stat_key].marked else 0
        definition = self.rules.get(stat_key)
        if definition is not None and character.stress_track(definition.stress_track).is_active:
            thorns += 1
        return thorns

    def build_snapshot(self, character: Character, stat_key: str) -> RollSnapshot:
        """Build what the player is shown for a roll of ``stat_key``."""
        stat = character.stats[stat_key]
        return RollSnapshot(
            spark=character.spark.value,
            stat=stat_key,
            dice_default=stat.value,
            is_bloodied=character.is_bloodied,
            is_rattled=character.is_rattled,
            is_marked=stat.marked,
            suggested_thorns=self.suggested_thorns(character, stat_key),
        )

    def check_stat(self, character: Character, stat_key: str) -> InvalidStatError | None:
        """Return the invalid-stat signal for a bad request, else None."""
        if not character.profile.rolls_stats:
            return InvalidStatError(
                f"{character.profile.kind.value} actors do not roll stats",
                stat=stat_key,
                known_stats=[],
            )
        if not character.has_stat(stat_key):
            return InvalidStatError(
                f"Unknown stat {stat_key!r}",
                stat=stat_key,
                known_stats=self.rules.ordered_keys(character.stats),
            )
        return None

    # =========================================================================
    # Resolution
    # =========================================================================

    async def roll_stat(
        self,
        character: Character,
        stat_key: str,
        decisions: RollDecisionInterface,
    ) -> RollResolution:
        """Resolve a roll of ``stat_key`` for ``character``.

        Args:
            character: The rolling character; its spark track may be spent.
            stat_key: The stat to roll.
            decisions: Answers the roll prompt.

        Returns:
            A RollResolution. Unknown stats and cancellations return
            without mutating anything.

        Raises:
            CollaboratorError: If persisting spark or posting the message fails.
            DiceRollError: If the dice cannot be rolled.
        """
        state = ResolverState.IDLE
        log = logger.bind(character_id=str(character.id), stat=stat_key)

        error = self.check_stat(character, stat_key)
        if error is not None:
            log.warning("Roll requested for invalid stat", reason=error.message)
            return RollResolution(status=RollStatus.INVALID_STAT, state=state, stat=stat_key, error=error)

        roll_data = character.roll_data()
        snapshot = self.build_snapshot(character, stat_key)
        state = _transition(state, ResolverState.AWAITING_DECISION)
        log.debug("Awaiting roll decision", spark=snapshot.spark, dice_default=snapshot.dice_default)

        decision = await self._await_decision(decisions, snapshot)
        if decision is None:
            state = _transition(state, ResolverState.CANCELLED)
            log.info("Roll cancelled")
            return RollResolution(status=RollStatus.CANCELLED, state=state, stat=stat_key, snapshot=snapshot)

        spark_spent = await self._settle_spark(character, decision.spark_used)

        request = RollRequest(
            stat=stat_key,
            stat_dice_count=decision.dice,
            thorns_count=decision.thorns,
            roll_data={
                **roll_data,
                "statDice": decision.dice,
                "thorns": decision.thorns,
                "assists": [assister.model_dump(by_alias=True) for assister in decision.assisters],
                "sparkSpent": spark_spent,
            },
        )
        roll = self.roller.roll_stat(request.stat_dice_count, request.thorns_count)
        await self._post(character, request, roll)

        state = _transition(state, ResolverState.RESOLVED)
        log.info("Roll resolved", outcome=roll.outcome.value, spark_spent=spark_spent)
        return RollResolution(
            status=RollStatus.RESOLVED,
            state=state,
            stat=stat_key,
            snapshot=snapshot,
            decision=decision,
            request=request,
            roll=roll,
            spark_spent=spark_spent,
        )

    async def _await_decision(
        self,
        decisions: RollDecisionInterface,
        snapshot: RollSnapshot,
    ) -> RollDecision | None:
        timeout = self.settings.decision_timeout_seconds
        try:
            if timeout is None:
                answer: Any = await decisions.request(snapshot)
            else:
                answer = await asyncio.wait_for(decisions.request(snapshot), timeout)
        except asyncio.TimeoutError:
            logger.info("Roll decision timed out", stat=snapshot.stat, timeout=timeout)
            return None

        if answer is None or isinstance(answer, RollDecision):
            return answer
        if isinstance(answer, Mapping):
            return RollDecision.model_validate(answer)
        raise RollResolutionError(
            f"Decision interface returned {type(answer).__name__}",
            state=ResolverState.AWAITING_DECISION.value,
        )

    async def _settle_spark(self, character: Character, requested: int) -> int:
        """Spend spark and persist the track; returns pips actually spent.

        The spend is made on a copy of the track and only lands on the
        character once the store has accepted it, so a failed write leaves
        the character as it was and the roll can be retried.
        """
        if requested <= 0:
            return 0
        track = character.spark.model_copy(deep=True)
        spent = track.consume(requested)
        if spent < requested:
            logger.warning(
                "Spark spend clamped",
                character_id=str(character.id),
                requested=requested,
                spent=spent,
            )
        if spent == 0:
            return 0
        try:
            await self.store.update(str(character.id), {"spark": track.model_dump()})
        except Exception as exc:
            raise CollaboratorError(
                f"Failed to persist spark: {exc}",
                collaborator="store",
                details={"character_id": str(character.id), "spark_requested": requested},
            ) from exc
        character.spark = track
        logger.info("Spark spent", character_id=str(character.id), spent=spent, remaining=track.value)
        return spent

    async def _post(self, character: Character, request: RollRequest, roll: StatRoll) -> None:
        message = RollMessage(
            actor=str(character.id),
            speaker=character.name,
            roll_mode=self.settings.roll_mode,
            formula=request.formula,
            roll_data=request.roll_data,
            result={
                "outcome": roll.outcome.value,
                "statDice": roll.stat_dice,
                "thornDice": roll.thorn_dice,
                "highest": roll.highest,
                "cuts": roll.cuts,
            },
        )
        try:
            await self.poster.post_roll_message(message)
        except Exception as exc:
            raise CollaboratorError(
                f"Failed to post roll message: {exc}",
                collaborator="messages",
                details={"character_id": str(character.id), "formula": request.formula},
            ) from exc


__all__ = [
    "ResolverState",
    "RollStatus",
    "RollRequest",
    "RollResolution",
    "RollResolver",
]
