"""Pytest configuration and shared fixtures.

This module provides common fixtures for the Grimwild engine test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from grimwild.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "GRIMWILD_DEBUG": "true",
        "GRIMWILD_LOG_LEVEL": "DEBUG",
        "GRIMWILD_GAME_ROLL_MODE": "gmroll",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def rules() -> Any:
    """The standard four-stat rules config."""
    from grimwild.core.config import default_rules

    return default_rules()


@pytest.fixture
def game_settings() -> Any:
    """Game settings with no decision timeout."""
    from grimwild.core.config import GameSettings

    return GameSettings(roll_mode="publicroll", decision_timeout_seconds=None)


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def legacy_character_data() -> dict[str, Any]:
    """A stored document written before stress pools were nested.

    Returns:
        Dictionary in the old flat-pool shape.
    """
    return {
        "name": "Old Wren",
        "xp": {"value": 9},
        "stats": {
            "bra": {"value": 2, "marked": False},
            "agi": {"value": 1, "marked": True},
            "wis": {"value": 3, "marked": False},
            "pre": {"value": 0, "marked": False},
        },
        "bloodied": {"diceNum": 2, "diceSize": "d6"},
        "rattled": {"diceNum": 0, "diceSize": "d6"},
        "spark": {"steps": [True, False]},
        "story": {"steps": [True, True, False]},
    }


@pytest.fixture
def sample_character(rules: Any, game_settings: Any) -> Any:
    """Create a character with two filled spark pips.

    Returns:
        Character instance.
    """
    from grimwild.models.character import create_character
    from grimwild.models.steps import StepTrack

    character = create_character("Wren", rules=rules, settings=game_settings, path="Ranger")
    character.spark = StepTrack(steps=[True, True, False])
    character.stats["bra"].value = 2
    return character


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def dice_roller() -> Any:
    """Create a DiceRoller with a fixed seed for reproducible tests."""
    from grimwild.engine.dice import DiceRoller

    return DiceRoller(seed=42)


@pytest.fixture
def store() -> Any:
    """In-memory character store."""
    from grimwild.engine.collaborators import InMemoryCharacterStore

    return InMemoryCharacterStore()


@pytest.fixture
def poster() -> Any:
    """Recording message poster."""
    from grimwild.engine.collaborators import RecordingMessagePoster

    return RecordingMessagePoster()


@pytest.fixture
def resolver(rules: Any, store: Any, poster: Any, dice_roller: Any, game_settings: Any) -> Any:
    """RollResolver wired to in-memory collaborators."""
    from grimwild.engine.resolver import RollResolver

    return RollResolver(rules, store, poster, roller=dice_roller, settings=game_settings)
