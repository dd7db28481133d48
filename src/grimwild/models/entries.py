"""Ordered list entries on a character sheet: conditions and bonds.

Both lists keep insertion order. Entries can be removed by position, the
way the sheet has always done it, or by their stable ``id``. Positional
removal is only safe while a single writer edits the list; removing by id
is not affected by other edits shifting positions.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, RootModel

from grimwild.core.logging import get_logger
from grimwild.models.dice import DicePool
from grimwild.models.enums import Severity


logger = get_logger(__name__)


class Condition(BaseModel):
    """A named ongoing condition with its own dice pool.

    Attributes:
        id: Stable identifier, generated when missing from stored data.
        name: Condition name.
        pool: Dice pool tracking the condition's weight.
        severity: How long the condition lasts.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    id: UUID = Field(default_factory=uuid4)
    name: str = ""
    pool: DicePool = Field(default_factory=DicePool)
    severity: Severity = Severity.URGENT


class Bond(BaseModel):
    """A bond with another character."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    id: UUID = Field(default_factory=uuid4)
    name: str = ""
    description: str = ""


class _EntrySequence:
    """List behaviour shared by the entry root models."""

    def __iter__(self) -> Iterator[Any]:  # type: ignore[override]
        return iter(self.root)  # type: ignore[attr-defined]

    def __getitem__(self, index: int) -> Any:
        return self.root[index]  # type: ignore[attr-defined]

    def __len__(self) -> int:
        return len(self.root)  # type: ignore[attr-defined]

    def remove_at(self, index: int) -> Any:
        """Remove the entry at ``index``; later entries shift down by one.

        Raises:
            IndexError: If ``index`` is outside the list.
        """
        entries = self.root  # type: ignore[attr-defined]
        if not 0 <= index < len(entries):
            raise IndexError(f"Entry index {index} out of range for list of {len(entries)}")
        removed = entries.pop(index)
        logger.debug("Entry removed by index", index=index, entry_id=str(removed.id))
        return removed

    def remove(self, entry_id: UUID | str) -> Any | None:
        """Remove the entry with ``entry_id``.

        Returns:
            The removed entry, or None if no entry has that id.
        """
        target = UUID(str(entry_id))
        entries = self.root  # type: ignore[attr-defined]
        for index, entry in enumerate(entries):
            if entry.id == target:
                logger.debug("Entry removed by id", entry_id=str(target))
                return entries.pop(index)
        return None

    def index_of(self, entry_id: UUID | str) -> int | None:
        """Current position of the entry with ``entry_id``, if present."""
        target = UUID(str(entry_id))
        for index, entry in enumerate(self.root):  # type: ignore[attr-defined]
            if entry.id == target:
                return index
        return None


class ConditionSet(_EntrySequence, RootModel[list[Condition]]):
    """Ordered list of conditions, persisted as a plain JSON array."""

    root: list[Condition] = Field(default_factory=list)

    def append(self, name: str, severity: Severity | str = Severity.URGENT) -> Condition:
        """Add a condition with an empty pool at the end of the list."""
        condition = Condition(name=name, severity=Severity(severity))
        self.root.append(condition)
        logger.debug("Condition added", name=name, severity=condition.severity.value)
        return condition

    def by_severity(self, severity: Severity | str) -> list[Condition]:
        """Conditions of one severity, in list order."""
        wanted = Severity(severity)
        return [condition for condition in self.root if condition.severity == wanted]


class BondList(_EntrySequence, RootModel[list[Bond]]):
    """Ordered list of bonds, persisted as a plain JSON array."""

    root: list[Bond] = Field(default_factory=list)

    def append(self, name: str = "", description: str = "") -> Bond:
        """Add a bond at the end of the list; the sheet adds blank ones."""
        bond = Bond(name=name, description=description)
        self.root.append(bond)
        return bond


__all__ = [
    "Condition",
    "Bond",
    "ConditionSet",
    "BondList",
]
