"""Schema migration for stored character documents.

Older documents stored the bloodied and rattled tracks as a flat dice pool
(``{"diceNum": 2, "diceSize": "d6"}``). The current shape nests the pool
under the track with a separate ``marked`` flag::

    {"pool": {"diceNum": 2, "diceSize": "d6"}, "marked": false}

Migration works on a deep copy, never touches already nested tracks and
may be run any number of times on the same input.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from grimwild.core.logging import get_logger


logger = get_logger(__name__)


STRESS_TRACKS: tuple[str, ...] = ("bloodied", "rattled")


@dataclass
class MigrationReport:
    """Outcome of migrating one character document.

    Attributes:
        data: The migrated document (a copy of the input).
        applied: Tracks that were rewritten into the nested shape.
        skipped: Tracks that needed no change.
    """

    data: dict[str, Any]
    applied: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.applied)


def is_legacy_track(track: Any) -> bool:
    """True for a flat pool stored directly on the track.

    A track whose ``pool`` is missing or empty but which carries ``diceNum``
    is in the old shape, whatever the dice count.
    """
    return isinstance(track, Mapping) and not track.get("pool") and "diceNum" in track


def migrate_stress_track(track: Mapping[str, Any]) -> tuple[dict[str, Any], bool]:
    """Nest a legacy flat pool under ``pool``.

    Every old field is carried into the pool so no dice count or die size
    is lost; the new ``marked`` flag starts cleared.

    Args:
        track: A stress track in either shape.

    Returns:
        Tuple of (track in the current shape, whether it was rewritten).
    """
    if not is_legacy_track(track):
        return dict(track), False
    pool = {key: value for key, value in track.items() if key != "pool"}
    return {"pool": pool, "marked": False}, True


def migrate_character_data(data: Mapping[str, Any]) -> MigrationReport:
    """Bring a stored character document up to the current shape.

    Args:
        data: The stored document. It is not modified.

    Returns:
        A MigrationReport with the migrated copy.
    """
    migrated: dict[str, Any] = copy.deepcopy(dict(data))
    report = MigrationReport(data=migrated)

    for name in STRESS_TRACKS:
        track = migrated.get(name)
        if not isinstance(track, Mapping):
            report.skipped.append(name)
            continue
        migrated[name], applied = migrate_stress_track(track)
        if applied:
            report.applied.append(name)
        else:
            report.skipped.append(name)

    if report.changed:
        logger.info("Character data migrated", tracks=report.applied)
    return report


__all__ = [
    "STRESS_TRACKS",
    "MigrationReport",
    "is_legacy_track",
    "migrate_stress_track",
    "migrate_character_data",
]
