"""Enumeration types for the Grimwild character engine.

String values are the ones stored in persisted character documents and
must not change.
"""

from __future__ import annotations

from enum import StrEnum


class DieSize(StrEnum):
    """Die types a dice pool can hold."""

    D4 = "d4"
    D6 = "d6"
    D8 = "d8"
    D10 = "d10"
    D12 = "d12"
    D20 = "d20"

    @property
    def faces(self) -> int:
        """Number of faces on this die."""
        return int(self.value[1:])


class Severity(StrEnum):
    """How long a condition is expected to weigh on a character."""

    URGENT = "urgent"
    SHORT_TERM = "shortTerm"
    LONG_TERM = "longTerm"
    PERMANENT = "permanent"

    @property
    def label(self) -> str:
        """Display label for the severity."""
        return {
            Severity.URGENT: "Urgent",
            Severity.SHORT_TERM: "Short Term",
            Severity.LONG_TERM: "Long Term",
            Severity.PERMANENT: "Permanent",
        }[self]


class ActorKind(StrEnum):
    """Kinds of actor a type profile can describe."""

    CHARACTER = "character"
    """Player character with stats, progression and resources."""

    NPC = "npc"
    """Non-player actor; carries pools but does not roll stats."""


__all__ = [
    "DieSize",
    "Severity",
    "ActorKind",
]
