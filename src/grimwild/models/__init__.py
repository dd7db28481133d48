"""Pydantic V2 models for character state.

Submodules:
    enums: Die sizes, condition severities, actor kinds.
    dice: DicePool and StressTrack.
    steps: StepTrack for spark and story.
    entries: Conditions and bonds.
    migration: Upgrades stored documents to the current shape.
    progression: XP to level curve.
    character: The Character aggregate.
"""

from __future__ import annotations

from grimwild.models.character import (
    PROFILES,
    Aspect,
    Background,
    Character,
    Experience,
    StatScore,
    TypeProfile,
    create_character,
    profile_for,
)
from grimwild.models.dice import DicePool, StressTrack
from grimwild.models.entries import Bond, BondList, Condition, ConditionSet
from grimwild.models.enums import ActorKind, DieSize, Severity
from grimwild.models.migration import (
    MigrationReport,
    migrate_character_data,
    migrate_stress_track,
)
from grimwild.models.progression import (
    level_for_xp,
    xp_step_rows,
    xp_threshold,
    xp_to_next_level,
)
from grimwild.models.steps import StepTrack


__all__ = [
    # Enums
    "ActorKind",
    "DieSize",
    "Severity",
    # Pools and tracks
    "DicePool",
    "StressTrack",
    "StepTrack",
    # Entries
    "Condition",
    "ConditionSet",
    "Bond",
    "BondList",
    # Migration
    "MigrationReport",
    "migrate_character_data",
    "migrate_stress_track",
    # Progression
    "level_for_xp",
    "xp_threshold",
    "xp_to_next_level",
    "xp_step_rows",
    # Character
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
