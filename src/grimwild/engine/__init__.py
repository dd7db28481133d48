"""Roll engine: dice, the decision boundary and stat roll resolution.

Submodules:
    dice: Dice rolling (d20 library) and outcome reading.
    decisions: RollDecisionInterface and bundled implementations.
    collaborators: Persistence and message interfaces.
    resolver: The stat roll state machine.

Example:
    >>> from grimwild.engine import RollResolver, DefaultDecision
    >>> resolver = RollResolver(None, store, poster)
    >>> resolution = await resolver.roll_stat(hero, "wis", DefaultDecision())
"""

from __future__ import annotations

# =============================================================================
# Dice Rolling
# =============================================================================
from grimwild.engine.dice import (
    DiceExpression,
    DiceRoller,
    RollOutcome,
    StatRoll,
    build_formula,
    read_outcome,
)

# =============================================================================
# Decisions
# =============================================================================
from grimwild.engine.decisions import (
    Assister,
    CallbackDecision,
    DefaultDecision,
    RollDecision,
    RollDecisionInterface,
    RollSnapshot,
    StaticDecision,
)

# =============================================================================
# Collaborators
# =============================================================================
from grimwild.engine.collaborators import (
    CharacterStore,
    InMemoryCharacterStore,
    MessagePoster,
    RecordingMessagePoster,
    RollMessage,
)

# =============================================================================
# Resolution
# =============================================================================
from grimwild.engine.resolver import (
    ResolverState,
    RollRequest,
    RollResolution,
    RollResolver,
    RollStatus,
)


__all__ = [
    # Dice
    "DiceExpression",
    "DiceRoller",
    "RollOutcome",
    "StatRoll",
    "build_formula",
    "read_outcome",
    # Decisions
    "Assister",
    "CallbackDecision",
    "DefaultDecision",
    "RollDecision",
    "RollDecisionInterface",
    "RollSnapshot",
    "StaticDecision",
    # Collaborators
    "CharacterStore",
    "InMemoryCharacterStore",
    "MessagePoster",
    "RecordingMessagePoster",
    "RollMessage",
    # Resolution
    "ResolverState",
    "RollRequest",
    "RollResolution",
    "RollResolver",
    "RollStatus",
]
