"""Tests for stored character migration."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from grimwild.models.character import Character
from grimwild.models.migration import (
    is_legacy_track,
    migrate_character_data,
    migrate_stress_track,
)


class TestStressTrackMigration:
    """Tests for single-track migration."""

    def test_legacy_track_nested(self) -> None:
        """Test a flat pool moves under ``pool`` with marked cleared."""
        track, applied = migrate_stress_track({"diceNum": 2, "diceSize": "d6"})

        assert applied
        assert track == {"pool": {"diceNum": 2, "diceSize": "d6"}, "marked": False}

    def test_extra_fields_carried(self) -> None:
        """Test every old field is kept inside the pool."""
        track, _ = migrate_stress_track({"diceNum": 1, "diceSize": "d8", "label": "x"})

        assert track["pool"] == {"diceNum": 1, "diceSize": "d8", "label": "x"}

    def test_current_track_untouched(self) -> None:
        """Test nested tracks pass through unchanged."""
        current = {"pool": {"diceNum": 1, "diceSize": "d6"}, "marked": True}

        track, applied = migrate_stress_track(current)

        assert not applied
        assert track == current

    def test_zero_dice_legacy_detected(self) -> None:
        """Test an empty flat pool is still recognised as the old shape."""
        assert is_legacy_track({"diceNum": 0, "diceSize": "d6"})
        assert not is_legacy_track({"pool": {"diceNum": 1}, "diceNum": 0})
        assert not is_legacy_track(None)

    @pytest.mark.parametrize("empty_pool", [None, {}])
    def test_empty_pool_with_flat_dice_migrated(self, empty_pool: Any) -> None:
        """Test a blank ``pool`` next to flat dice is treated as the old shape."""
        track, applied = migrate_stress_track({"pool": empty_pool, "diceNum": 2, "diceSize": "d6"})

        assert applied
        assert track == {"pool": {"diceNum": 2, "diceSize": "d6"}, "marked": False}

    def test_null_pool_document_loads(self, legacy_character_data: dict[str, Any]) -> None:
        """Test a stored track with a null pool loads with its flat dice."""
        legacy_character_data["bloodied"] = {"pool": None, "diceNum": 2, "diceSize": "d6"}

        hero = Character.model_validate(legacy_character_data)

        assert hero.bloodied.pool.dice_num == 2
        assert hero.is_bloodied


class TestCharacterDataMigration:
    """Tests for whole-document migration."""

    def test_both_tracks_migrated(self, legacy_character_data: dict[str, Any]) -> None:
        """Test both stress tracks are rewritten."""
        report = migrate_character_data(legacy_character_data)

        assert report.changed
        assert report.applied == ["bloodied", "rattled"]
        assert report.data["bloodied"]["pool"]["diceNum"] == 2
        assert report.data["rattled"]["marked"] is False

    def test_input_not_modified(self, legacy_character_data: dict[str, Any]) -> None:
        """Test migration works on a copy."""
        original = copy.deepcopy(legacy_character_data)

        migrate_character_data(legacy_character_data)

        assert legacy_character_data == original

    def test_idempotent(self, legacy_character_data: dict[str, Any]) -> None:
        """Test migrating migrated data changes nothing."""
        once = migrate_character_data(legacy_character_data).data
        twice = migrate_character_data(once)

        assert not twice.changed
        assert twice.data == once

    def test_missing_tracks_skipped(self) -> None:
        """Test documents without stress tracks are left alone."""
        report = migrate_character_data({"name": "Blank"})

        assert not report.changed
        assert report.skipped == ["bloodied", "rattled"]
        assert report.data == {"name": "Blank"}

    def test_other_fields_preserved(self, legacy_character_data: dict[str, Any]) -> None:
        """Test unrelated fields survive migration unchanged."""
        report = migrate_character_data(legacy_character_data)

        assert report.data["stats"] == legacy_character_data["stats"]
        assert report.data["spark"] == {"steps": [True, False]}
