"""Interfaces to the hosting application's persistence and chat log.

The engine mutates characters in memory and reports the changes through
these two protocols. Calls are awaited but are not transactional across
each other. In-memory implementations are provided for hosts without a
document store and for tests.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from grimwild.core.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class RollMessage:
    """A resolved roll ready to be posted.

    Attributes:
        actor: Id of the rolling character.
        speaker: Display name the message is spoken as.
        roll_mode: Visibility mode from settings.
        formula: Textual dice formula.
        roll_data: Character roll data plus the roll's own fields.
        result: Outcome reading and dice faces.
    """

    actor: str
    speaker: str
    roll_mode: str
    formula: str
    roll_data: dict[str, Any]
    result: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class CharacterStore(Protocol):
    """Writes partial field updates to a stored character."""

    async def update(self, character_id: str, partial_fields: dict[str, Any]) -> None:
        ...


@runtime_checkable
class MessagePoster(Protocol):
    """Posts resolved rolls to the chat log."""

    async def post_roll_message(self, message: RollMessage) -> None:
        ...


class InMemoryCharacterStore:
    """Keeps every update in order and the latest merged document per id.

    Attributes:
        updates: ``(character_id, partial_fields)`` pairs in call order.
        documents: Latest document per character id.
        fail_with: Exception to raise from ``update`` instead of storing.
    """

    def __init__(self, documents: dict[str, dict[str, Any]] | None = None) -> None:
        self.documents: dict[str, dict[str, Any]] = documents or {}
        self.updates: list[tuple[str, dict[str, Any]]] = []
        self.fail_with: Exception | None = None

    async def update(self, character_id: str, partial_fields: dict[str, Any]) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        fields = copy.deepcopy(partial_fields)
        self.updates.append((character_id, fields))
        self.documents.setdefault(character_id, {}).update(fields)
        logger.debug("Character updated", character_id=character_id, fields=sorted(fields))


class RecordingMessagePoster:
    """Keeps posted roll messages in order."""

    def __init__(self) -> None:
        self.messages: list[RollMessage] = []
        self.fail_with: Exception | None = None

    async def post_roll_message(self, message: RollMessage) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.messages.append(message)
        logger.debug("Roll message posted", actor=message.actor, formula=message.formula)


__all__ = [
    "RollMessage",
    "CharacterStore",
    "MessagePoster",
    "InMemoryCharacterStore",
    "RecordingMessagePoster",
]
