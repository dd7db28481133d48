"""Tests for stat roll resolution."""

from __future__ import annotations

import asyncio
import copy

import pytest

from grimwild.core.config import GameSettings, RulesConfig
from grimwild.core.exceptions import CollaboratorError, InvalidStatError, RollResolutionError
from grimwild.engine.collaborators import InMemoryCharacterStore, RecordingMessagePoster
from grimwild.engine.decisions import (
    CallbackDecision,
    DefaultDecision,
    RollDecision,
    RollSnapshot,
    StaticDecision,
)
from grimwild.engine.dice import DiceRoller
from grimwild.engine.resolver import ResolverState, RollResolver, RollStatus
from grimwild.models.character import Character
from grimwild.models.enums import ActorKind


class TestSnapshot:
    """Tests for what the player is shown."""

    def test_snapshot_values(self, resolver: RollResolver, sample_character: Character) -> None:
        """Test the snapshot reflects the character's current state."""
        snapshot = resolver.build_snapshot(sample_character, "bra")

        assert snapshot.spark == 2
        assert snapshot.stat == "bra"
        assert snapshot.dice_default == 2
        assert not snapshot.is_bloodied
        assert not snapshot.is_rattled
        assert snapshot.suggested_thorns == 0

    def test_marked_stat_adds_thorn(self, resolver: RollResolver, sample_character: Character) -> None:
        """Test a marked stat suggests a thorn."""
        sample_character.stats["bra"].marked = True

        assert resolver.suggested_thorns(sample_character, "bra") == 1

    def test_stress_thorn_follows_track(self, resolver: RollResolver, sample_character: Character) -> None:
        """Test only stats tied to an active track get its thorn."""
        sample_character.bloodied.set_dice(2)

        assert resolver.suggested_thorns(sample_character, "bra") == 1
        assert resolver.suggested_thorns(sample_character, "agi") == 1
        assert resolver.suggested_thorns(sample_character, "wis") == 0

    def test_thorns_stack(self, resolver: RollResolver, sample_character: Character) -> None:
        """Test marked and stressed together suggest two thorns."""
        sample_character.stats["pre"].marked = True
        sample_character.rattled.set_dice(1)

        assert resolver.suggested_thorns(sample_character, "pre") == 2


class TestInvalidStat:
    """Tests for requests that cannot roll."""

    @pytest.mark.asyncio
    async def test_unknown_stat_is_noop(
        self,
        resolver: RollResolver,
        sample_character: Character,
        store: InMemoryCharacterStore,
        poster: RecordingMessagePoster,
    ) -> None:
        """Test an unknown stat signals and touches nothing."""
        before = sample_character.to_document()
        interface = StaticDecision(RollDecision(dice=1, spark_used=1))

        resolution = await resolver.roll_stat(sample_character, "luck", interface)

        assert resolution.status == RollStatus.INVALID_STAT
        assert resolution.state == ResolverState.IDLE
        assert not resolution.resolved
        assert isinstance(resolution.error, InvalidStatError)
        assert resolution.error.details["known_stats"] == ["bra", "agi", "wis", "pre"]
        assert interface.requests == []
        assert sample_character.to_document() == before
        assert store.updates == []
        assert poster.messages == []

    @pytest.mark.asyncio
    async def test_raise_for_status(self, resolver: RollResolver, sample_character: Character) -> None:
        """Test the invalid-stat signal can be raised on request."""
        resolution = await resolver.roll_stat(sample_character, "luck", DefaultDecision())

        with pytest.raises(InvalidStatError):
            resolution.raise_for_status()

    @pytest.mark.asyncio
    async def test_npc_cannot_roll(self, resolver: RollResolver, sample_character: Character) -> None:
        """Test actors whose profile does not roll stats are refused."""
        sample_character.kind = ActorKind.NPC

        resolution = await resolver.roll_stat(sample_character, "bra", DefaultDecision())

        assert resolution.status == RollStatus.INVALID_STAT
        assert resolution.error is not None
        assert resolution.error.stat == "bra"


class TestCancellation:
    """Tests for dismissed prompts."""

    @pytest.mark.asyncio
    async def test_cancel_leaves_character_untouched(
        self,
        resolver: RollResolver,
        sample_character: Character,
        store: InMemoryCharacterStore,
        poster: RecordingMessagePoster,
    ) -> None:
        """Test cancelling mutates nothing and posts nothing."""
        before = copy.deepcopy(sample_character.to_document())
        interface = StaticDecision(None)

        resolution = await resolver.roll_stat(sample_character, "bra", interface)

        assert resolution.status == RollStatus.CANCELLED
        assert resolution.state == ResolverState.CANCELLED
        assert resolution.snapshot == interface.requests[0]
        assert resolution.roll is None
        assert resolution.spark_spent == 0
        assert sample_character.to_document() == before
        assert store.updates == []
        assert poster.messages == []

    @pytest.mark.asyncio
    async def test_cancel_never_raises(self, resolver: RollResolver, sample_character: Character) -> None:
        """Test cancellation is a normal outcome."""
        resolution = await resolver.roll_stat(sample_character, "bra", StaticDecision(None))

        resolution.raise_for_status()

    @pytest.mark.asyncio
    async def test_timeout_cancels(
        self,
        rules: RulesConfig,
        store: InMemoryCharacterStore,
        poster: RecordingMessagePoster,
        sample_character: Character,
    ) -> None:
        """Test an unanswered prompt cancels once the timeout passes."""
        resolver = RollResolver(
            rules,
            store,
            poster,
            roller=DiceRoller(seed=1),
            settings=GameSettings(decision_timeout_seconds=0.01),
        )

        async def never(snapshot: RollSnapshot) -> RollDecision | None:
            await asyncio.sleep(10)
            return RollDecision(dice=1)

        resolution = await resolver.roll_stat(sample_character, "bra", CallbackDecision(never))

        assert resolution.status == RollStatus.CANCELLED
        assert sample_character.spark.steps == [True, True, False]
        assert poster.messages == []


class TestResolvedRoll:
    """Tests for rolls that go through."""

    @pytest.mark.asyncio
    async def test_spend_one_spark(
        self,
        resolver: RollResolver,
        sample_character: Character,
        store: InMemoryCharacterStore,
        poster: RecordingMessagePoster,
    ) -> None:
        """Test spending one spark clears the first pip and is persisted."""
        decision = RollDecision(dice=2, thorns=1, spark_used=1)

        resolution = await resolver.roll_stat(sample_character, "bra", StaticDecision(decision))

        assert resolution.status == RollStatus.RESOLVED
        assert resolution.state == ResolverState.RESOLVED
        assert resolution.spark_spent == 1
        assert sample_character.spark.steps == [False, True, False]
        assert store.updates == [
            (str(sample_character.id), {"spark": {"steps": [False, True, False]}}),
        ]
        assert len(poster.messages) == 1

    @pytest.mark.asyncio
    async def test_spark_spend_clamped(
        self,
        resolver: RollResolver,
        sample_character: Character,
    ) -> None:
        """Test asking for more spark than is filled spends what there is."""
        decision = RollDecision(dice=1, spark_used=5)

        resolution = await resolver.roll_stat(sample_character, "bra", StaticDecision(decision))

        assert resolution.spark_spent == 2
        assert sample_character.spark.value == 0

    @pytest.mark.asyncio
    async def test_empty_spark_not_persisted(
        self,
        resolver: RollResolver,
        sample_character: Character,
        store: InMemoryCharacterStore,
        poster: RecordingMessagePoster,
    ) -> None:
        """Test asking for spark with none filled writes nothing to the store."""
        sample_character.spark.consume(2)
        decision = RollDecision(dice=1, spark_used=1)

        resolution = await resolver.roll_stat(sample_character, "bra", StaticDecision(decision))

        assert resolution.resolved
        assert resolution.spark_spent == 0
        assert store.updates == []
        assert poster.messages[0].roll_data["sparkSpent"] == 0

    @pytest.mark.asyncio
    async def test_no_spark_no_store_write(
        self,
        resolver: RollResolver,
        sample_character: Character,
        store: InMemoryCharacterStore,
        poster: RecordingMessagePoster,
    ) -> None:
        """Test a roll without spark only posts the message."""
        resolution = await resolver.roll_stat(sample_character, "agi", DefaultDecision())

        assert resolution.resolved
        assert store.updates == []
        assert len(poster.messages) == 1

    @pytest.mark.asyncio
    async def test_message_contents(
        self,
        resolver: RollResolver,
        sample_character: Character,
        poster: RecordingMessagePoster,
    ) -> None:
        """Test the posted message carries the formula and roll data."""
        decision = RollDecision.model_validate(
            {"dice": 3, "thorns": 1, "sparkUsed": 1, "assisters": [{"name": "Ash"}]}
        )

        resolution = await resolver.roll_stat(sample_character, "bra", StaticDecision(decision))

        message = poster.messages[0]
        assert message.formula == "{3d6kh1, 1d8}"
        assert message.actor == str(sample_character.id)
        assert message.speaker == "Wren"
        assert message.roll_mode == "publicroll"
        assert message.roll_data["statDice"] == 3
        assert message.roll_data["thorns"] == 1
        assert message.roll_data["sparkSpent"] == 1
        assert message.roll_data["spark"] == 2
        assert message.roll_data["assists"] == [{"name": "Ash", "actorId": None}]
        assert resolution.roll is not None
        assert message.result["outcome"] == resolution.roll.outcome.value
        assert len(resolution.roll.stat_dice) == 3

    @pytest.mark.asyncio
    async def test_mapping_answer_accepted(
        self,
        resolver: RollResolver,
        sample_character: Character,
    ) -> None:
        """Test a plain mapping answer is read as a decision."""
        interface = CallbackDecision(lambda snapshot: {"dice": 1, "sparkSpent": 1})

        resolution = await resolver.roll_stat(sample_character, "wis", interface)

        assert resolution.resolved
        assert resolution.decision == RollDecision(dice=1, spark_used=1)
        assert resolution.spark_spent == 1

    @pytest.mark.asyncio
    async def test_unexpected_answer_rejected(
        self,
        resolver: RollResolver,
        sample_character: Character,
    ) -> None:
        """Test an answer of the wrong type raises."""
        interface = CallbackDecision(lambda snapshot: 42)

        with pytest.raises(RollResolutionError):
            await resolver.roll_stat(sample_character, "bra", interface)


class TestCollaboratorFailures:
    """Tests for failing persistence and messaging."""

    @pytest.mark.asyncio
    async def test_store_failure(
        self,
        resolver: RollResolver,
        sample_character: Character,
        store: InMemoryCharacterStore,
        poster: RecordingMessagePoster,
    ) -> None:
        """Test a failed spark write stops before rolling."""
        store.fail_with = RuntimeError("store offline")

        with pytest.raises(CollaboratorError) as exc_info:
            await resolver.roll_stat(sample_character, "bra", StaticDecision(RollDecision(dice=1, spark_used=1)))

        assert exc_info.value.details["collaborator"] == "store"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert sample_character.spark.steps == [True, True, False]
        assert poster.messages == []

    @pytest.mark.asyncio
    async def test_retry_after_store_failure_spends_once(
        self,
        resolver: RollResolver,
        sample_character: Character,
        store: InMemoryCharacterStore,
        poster: RecordingMessagePoster,
    ) -> None:
        """Test retrying a roll whose spark write failed spends spark once."""
        decisions = StaticDecision(RollDecision(dice=1, spark_used=1))
        store.fail_with = RuntimeError("store offline")

        with pytest.raises(CollaboratorError):
            await resolver.roll_stat(sample_character, "bra", decisions)

        store.fail_with = None
        resolution = await resolver.roll_stat(sample_character, "bra", decisions)

        assert resolution.spark_spent == 1
        assert sample_character.spark.value == 1
        assert sample_character.spark.steps == [False, True, False]
        assert store.updates == [
            (str(sample_character.id), {"spark": {"steps": [False, True, False]}}),
        ]
        assert len(poster.messages) == 1

    @pytest.mark.asyncio
    async def test_message_failure_keeps_spark_spent(
        self,
        resolver: RollResolver,
        sample_character: Character,
        store: InMemoryCharacterStore,
        poster: RecordingMessagePoster,
    ) -> None:
        """Test spark written before a failed post stays spent."""
        poster.fail_with = RuntimeError("chat offline")

        with pytest.raises(CollaboratorError) as exc_info:
            await resolver.roll_stat(sample_character, "bra", StaticDecision(RollDecision(dice=1, spark_used=1)))

        assert exc_info.value.details["collaborator"] == "messages"
        assert sample_character.spark.steps == [False, True, False]
        assert len(store.updates) == 1
