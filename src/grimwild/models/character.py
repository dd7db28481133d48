"""The Character aggregate.

A Character exclusively owns its stats, stress tracks, conditions, step
tracks and sheet entries. Actor-kind differences are expressed through a
TypeProfile rather than subclasses. Everything derived (level, stress
flags, spark value, stat ordering) is computed on read and never stored.

Stored documents are migrated to the current shape on load, so
``Character.model_validate(stored_document)`` always works for documents
written by older versions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

from grimwild.core.config import GameSettings, RulesConfig, StressTrackName, default_rules
from grimwild.core.constants import (
    BACKGROUND_COUNT,
    STAT_INITIAL,
    STAT_MAX,
    STAT_MIN,
    TRAIT_POLARITIES,
    WISES_PER_BACKGROUND,
)
from grimwild.core.exceptions import ValidationError
from grimwild.core.logging import get_logger
from grimwild.models.dice import StressTrack
from grimwild.models.entries import BondList, ConditionSet
from grimwild.models.enums import ActorKind
from grimwild.models.migration import STRESS_TRACKS, is_legacy_track, migrate_character_data
from grimwild.models.progression import level_for_xp, xp_step_rows, xp_to_next_level
from grimwild.models.steps import StepTrack


logger = get_logger(__name__)


StatValue = Annotated[int, Field(ge=STAT_MIN, le=STAT_MAX, description="Stat value (0-3)")]


# =============================================================================
# Sheet Components
# =============================================================================


class StatScore(BaseModel):
    """One stat: its value (also its default dice count) and marked flag."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    value: StatValue = STAT_INITIAL
    marked: bool = False


class Experience(BaseModel):
    """Accumulated experience points."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    value: int = Field(default=0, ge=0)


class Background(BaseModel):
    """A background and the wises that come with it."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    wises: list[str] = Field(default_factory=lambda: [""] * WISES_PER_BACKGROUND)


class Aspect(BaseModel):
    """A trait or desire; ``are`` says whether the character is or is not it."""

    model_config = ConfigDict(extra="ignore")

    are: bool = True
    value: str = ""


def _default_backgrounds() -> list[Background]:
    return [Background() for _ in range(BACKGROUND_COUNT)]


def _default_aspects() -> list[Aspect]:
    return [Aspect(are=polarity) for polarity in TRAIT_POLARITIES]


def _default_stats() -> dict[str, StatScore]:
    return {key: StatScore() for key in default_rules().stat_keys}


# =============================================================================
# Type Profiles
# =============================================================================


class TypeProfile(BaseModel):
    """Capabilities an actor kind brings to the aggregate.

    Attributes:
        kind: The actor kind described.
        rolls_stats: Whether stat rolls may be requested.
        tracks_progression: Whether XP and levels apply.
    """

    model_config = ConfigDict(frozen=True)

    kind: ActorKind
    rolls_stats: bool = True
    tracks_progression: bool = True


PROFILES: dict[ActorKind, TypeProfile] = {
    ActorKind.CHARACTER: TypeProfile(kind=ActorKind.CHARACTER),
    ActorKind.NPC: TypeProfile(kind=ActorKind.NPC, rolls_stats=False, tracks_progression=False),
}


def profile_for(kind: ActorKind | str) -> TypeProfile:
    """Look up the profile for an actor kind."""
    return PROFILES[ActorKind(kind)]


# =============================================================================
# Character
# =============================================================================


class Character(BaseModel):
    """A character sheet's full mechanical state.

    Attributes:
        id: Unique character identifier.
        name: Character name.
        kind: Actor kind, selecting the TypeProfile.
        path: The character's path (class).
        xp: Accumulated experience.
        stats: Stat key to value and marked flag.
        bloodied: Physical stress track.
        rattled: Mental stress track.
        conditions: Ongoing conditions in sheet order.
        spark: Spendable spark pips.
        story: Story progress pips.
        features: Free-text features.
        backgrounds: Backgrounds and their wises.
        traits: Traits with polarity.
        desires: Desires with polarity.
        bonds: Bonds with other characters.

    Example:
        >>> hero = create_character("Wren")
        >>> hero.level
        1
        >>> hero.is_bloodied
        False
    """

    model_config = ConfigDict(
        validate_assignment=True,
        populate_by_name=True,
        extra="ignore",
    )

    id: UUID = Field(default_factory=uuid4)
    name: str = ""
    kind: ActorKind = ActorKind.CHARACTER
    path: str = ""
    xp: Experience = Field(default_factory=Experience)
    stats: dict[str, StatScore] = Field(default_factory=_default_stats)
    bloodied: StressTrack = Field(default_factory=StressTrack)
    rattled: StressTrack = Field(default_factory=StressTrack)
    conditions: ConditionSet = Field(default_factory=ConditionSet)
    spark: StepTrack = Field(default_factory=StepTrack)
    story: StepTrack = Field(default_factory=StepTrack)
    features: str = ""
    backgrounds: list[Background] = Field(default_factory=_default_backgrounds)
    traits: list[Aspect] = Field(default_factory=_default_aspects)
    desires: list[Aspect] = Field(default_factory=_default_aspects)
    bonds: BondList = Field(default_factory=BondList)

    @model_validator(mode="before")
    @classmethod
    def migrate_legacy_shape(cls, data: Any) -> Any:
        """Upgrade flat stress pools from older stored documents."""
        if isinstance(data, Mapping) and any(is_legacy_track(data.get(name)) for name in STRESS_TRACKS):
            return migrate_character_data(data).data
        return data

    # =========================================================================
    # Derived values
    # =========================================================================

    @property
    def profile(self) -> TypeProfile:
        return profile_for(self.kind)

    @property
    def level(self) -> int:
        """Level derived from XP; never stored."""
        return level_for_xp(self.xp.value)

    @property
    def xp_to_next_level(self) -> int:
        return xp_to_next_level(self.xp.value)

    def xp_rows(self, settings: GameSettings | None = None) -> list[list[tuple[int, bool]]]:
        """The sheet's XP pip grid with each pip's filled state.

        Pips numbered up to the current XP are filled. The number of rows
        comes from ``settings.xp_display_rows``.
        """
        settings = settings or GameSettings()
        return [
            [(pip, pip <= self.xp.value) for pip in row]
            for row in xp_step_rows(settings.xp_display_rows)
        ]

    @property
    def is_bloodied(self) -> bool:
        """True while the bloodied pool holds dice, regardless of ``marked``."""
        return self.bloodied.is_active

    @property
    def is_rattled(self) -> bool:
        """True while the rattled pool holds dice, regardless of ``marked``."""
        return self.rattled.is_active

    def stress_track(self, name: StressTrackName) -> StressTrack:
        """Return the bloodied or rattled track by name."""
        if name == "bloodied":
            return self.bloodied
        if name == "rattled":
            return self.rattled
        raise ValidationError(f"Unknown stress track {name!r}", field_name="name", invalid_value=name)

    def has_stat(self, key: str) -> bool:
        return key in self.stats

    def ordered_stats(self, rules: RulesConfig | None = None) -> list[tuple[str, StatScore]]:
        """Stats in sheet order; keys the rules do not know sort last."""
        rules = rules or default_rules()
        return [(key, self.stats[key]) for key in rules.ordered_keys(self.stats)]

    # =========================================================================
    # Mutations
    # =========================================================================

    def change_xp(self, pip: int) -> int:
        """Apply a click on XP pip number ``pip``.

        Clicking the pip that matches the current XP steps back by one, so
        pips behave like a toggle; any other pip sets XP to that number.

        Returns:
            The new XP value.
        """
        if pip < 0:
            raise ValidationError("XP pip cannot be negative", field_name="pip", invalid_value=pip)
        current = self.xp.value
        new_value = pip if pip != current else max(0, current - 1)
        self.xp = Experience(value=new_value)
        logger.debug("XP changed", character_id=str(self.id), old=current, new=new_value)
        return new_value

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_document(self) -> dict[str, Any]:
        """Dump the persisted field shape (camelCase pool keys, no derived values)."""
        return self.model_dump(mode="json", by_alias=True)

    def roll_data(self) -> dict[str, Any]:
        """Data handed to the dice roller and the roll message.

        The persisted document plus the derived stress flags, the spark
        value as an integer and the character id.
        """
        data = self.to_document()
        data["isBloodied"] = self.is_bloodied
        data["isRattled"] = self.is_rattled
        data["spark"] = self.spark.value
        data["id"] = str(self.id)
        return data


def create_character(
    name: str,
    *,
    kind: ActorKind = ActorKind.CHARACTER,
    rules: RulesConfig | None = None,
    settings: GameSettings | None = None,
    path: str = "",
) -> Character:
    """Create a character with the documented starting values.

    Every recognised stat starts at 1, both stress pools are empty and the
    spark track holds ``default_spark_steps`` blank pips.

    Args:
        name: Character name.
        kind: Actor kind.
        rules: Stat configuration; defaults to the standard four stats.
        settings: Game settings; defaults to environment-loaded settings.
        path: The character's path.

    Returns:
        A new Character.
    """
    rules = rules or default_rules()
    settings = settings or GameSettings()
    character = Character(
        name=name,
        kind=kind,
        path=path,
        stats={key: StatScore() for key in rules.stat_keys},
        spark=StepTrack.blank(settings.default_spark_steps),
    )
    logger.info("Character created", character_id=str(character.id), name=name, kind=ActorKind(kind).value)
    return character


__all__ = [
    "StatScore",
    "Experience",
    "Background",
    "Aspect",
    "TypeProfile",
    "PROFILES",
    "profile_for",
    "Character",
    "create_character",
]
