"""Configuration management for the Grimwild character engine.

Two kinds of configuration live here:

* Environment-bound settings (``Settings``, ``GameSettings``) loaded with
  pydantic-settings from environment variables and ``.env`` files.
* The rules configuration (``RulesConfig``), an explicit struct listing the
  recognised stats and their display metadata. It is passed into the
  resolver and character factory rather than looked up globally.

Example:
    >>> from grimwild.core.config import get_settings, default_rules
    >>> settings = get_settings()
    >>> settings.game.roll_mode
    'publicroll'
    >>> [stat.key for stat in default_rules().stats]
    ['bra', 'agi', 'wis', 'pre']

Environment Variables:
    GRIMWILD_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    GRIMWILD_JSON_LOGS: Emit JSON logs instead of console output
    GRIMWILD_GAME_ROLL_MODE: Roll mode handed to the message collaborator
    GRIMWILD_GAME_DECISION_TIMEOUT_SECONDS: Cancel unanswered roll prompts
"""

from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from grimwild.core.constants import UNKNOWN_STAT_ORDER, XP_DISPLAY_ROWS
from grimwild.core.exceptions import ConfigurationError


StressTrackName = Literal["bloodied", "rattled"]


# =============================================================================
# Rules Configuration
# =============================================================================


class StatDefinition(BaseModel):
    """Display metadata for one recognised stat.

    Attributes:
        key: Short key used in character data (e.g. 'bra').
        label: Display name.
        abbreviation: Short display name.
        order: Sort position on the sheet.
        stress_track: Which stress track weighs on rolls of this stat.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    key: str = Field(min_length=1, max_length=16, description="Stat key")
    label: str = Field(min_length=1, description="Display name")
    abbreviation: str = Field(min_length=1, max_length=8, description="Abbreviation")
    order: int = Field(default=0, ge=0, description="Sort position")
    stress_track: StressTrackName = Field(description="Stress track for this stat")


class RulesConfig(BaseModel):
    """The set of stats a character sheet recognises.

    Attributes:
        stats: Stat definitions, unique by key.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    stats: tuple[StatDefinition, ...] = Field(min_length=1, description="Recognised stats")

    @model_validator(mode="after")
    def validate_unique_keys(self) -> "RulesConfig":
        """Ensure no two stat definitions share a key.

        Raises:
            ConfigurationError: If a key is defined twice.
        """
        seen: set[str] = set()
        for stat in self.stats:
            if stat.key in seen:
                raise ConfigurationError(
                    f"Stat key {stat.key!r} is defined more than once",
                    config_key="stats",
                )
            seen.add(stat.key)
        return self

    @property
    def stat_keys(self) -> list[str]:
        """Stat keys in definition order."""
        return [stat.key for stat in self.ordered()]

    def ordered(self) -> list[StatDefinition]:
        """Return the stat definitions sorted by their sheet order."""
        return sorted(self.stats, key=lambda stat: stat.order)

    def get(self, key: str) -> StatDefinition | None:
        """Look up a stat definition by key."""
        for stat in self.stats:
            if stat.key == key:
                return stat
        return None

    def order_of(self, key: str) -> int:
        """Sort position of a key; unknown keys sort last."""
        stat = self.get(key)
        return stat.order if stat is not None else UNKNOWN_STAT_ORDER

    def ordered_keys(self, keys: Iterable[str]) -> list[str]:
        """Sort arbitrary stat keys by definition order, unknown keys last."""
        return sorted(keys, key=self.order_of)


def default_rules() -> RulesConfig:
    """Return the standard four-stat configuration.

    Brawn and Agility are physical and weighed down by being bloodied;
    Wits and Presence are mental and weighed down by being rattled.
    """
    return RulesConfig(
        stats=(
            StatDefinition(key="bra", label="Brawn", abbreviation="BRA", order=0, stress_track="bloodied"),
            StatDefinition(key="agi", label="Agility", abbreviation="AGI", order=1, stress_track="bloodied"),
            StatDefinition(key="wis", label="Wits", abbreviation="WIS", order=2, stress_track="rattled"),
            StatDefinition(key="pre", label="Presence", abbreviation="PRE", order=3, stress_track="rattled"),
        )
    )


# =============================================================================
# Environment Settings
# =============================================================================


class GameSettings(BaseSettings):
    """Configuration for roll resolution behavior.

    Attributes:
        roll_mode: Visibility mode handed to the message collaborator.
        decision_timeout_seconds: Cancel a pending roll prompt after this long.
        xp_display_rows: Rows in the XP pip grid.
        default_spark_steps: Spark pips on a newly created character.
    """

    model_config = SettingsConfigDict(
        env_prefix="GRIMWILD_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    roll_mode: Literal["publicroll", "gmroll", "blindroll", "selfroll"] = Field(
        default="publicroll",
        description="Roll visibility mode",
    )
    decision_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Seconds to wait for a roll decision before cancelling",
    )
    xp_display_rows: int = Field(
        default=XP_DISPLAY_ROWS,
        ge=1,
        le=20,
        description="Rows in the XP pip grid",
    )
    default_spark_steps: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Spark pips on a new character",
    )


class Settings(BaseSettings):
    """Main settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Logging level.
        json_logs: Emit JSON logs.
        log_file: Optional file for stdlib log records.
        game: Roll resolution settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="GRIMWILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="Grimwild Character Engine", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(default=False, description="Emit JSON logs")
    log_file: str | None = Field(default=None, description="Also write stdlib logs to this file")

    game: GameSettings = Field(default_factory=GameSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the settings singleton.

    Returns:
        The cached Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "StressTrackName",
    "StatDefinition",
    "RulesConfig",
    "default_rules",
    "GameSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
