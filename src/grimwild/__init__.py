"""Grimwild - character resource economy and roll resolution.

A library modelling a Grimwild character sheet's mechanics: dice pools on
stress tracks and conditions, spark and story step tracks, the XP level
curve, and the resolver that turns "roll this stat" into a resolved roll.

Rendering, document storage and chat are left to the hosting application,
which plugs in through the decision, store and message interfaces.

Example:
    >>> from grimwild import create_character, RollResolver, DefaultDecision
    >>> from grimwild import InMemoryCharacterStore, RecordingMessagePoster
    >>>
    >>> hero = create_character("Wren")
    >>> resolver = RollResolver(None, InMemoryCharacterStore(), RecordingMessagePoster())
    >>> resolution = await resolver.roll_stat(hero, "agi", DefaultDecision())
    >>> resolution.roll.outcome

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 character models and migration.
    engine: Dice, decisions, collaborators and the roll resolver.
"""

from __future__ import annotations

# Core
from grimwild.core.config import RulesConfig, Settings, default_rules, get_settings
from grimwild.core.exceptions import GrimwildError, InvalidStatError
from grimwild.core.logging import configure_logging, get_logger

# Models
from grimwild.models import (
    ActorKind,
    Character,
    Condition,
    DicePool,
    Severity,
    StepTrack,
    StressTrack,
    create_character,
    level_for_xp,
    migrate_character_data,
)

# Engine
from grimwild.engine import (
    DefaultDecision,
    DiceRoller,
    InMemoryCharacterStore,
    RecordingMessagePoster,
    RollDecision,
    RollDecisionInterface,
    RollOutcome,
    RollResolution,
    RollResolver,
    RollSnapshot,
    RollStatus,
    StaticDecision,
)


__version__ = "0.1.0"
__all__ = [
    "__version__",
    # Core
    "GrimwildError",
    "InvalidStatError",
    "RulesConfig",
    "Settings",
    "default_rules",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Models
    "ActorKind",
    "Character",
    "Condition",
    "DicePool",
    "Severity",
    "StepTrack",
    "StressTrack",
    "create_character",
    "level_for_xp",
    "migrate_character_data",
    # Engine
    "DefaultDecision",
    "DiceRoller",
    "InMemoryCharacterStore",
    "RecordingMessagePoster",
    "RollDecision",
    "RollDecisionInterface",
    "RollOutcome",
    "RollResolution",
    "RollResolver",
    "RollSnapshot",
    "RollStatus",
    "StaticDecision",
]
