"""Settings for the container trait layer.

Backends read their growth policy from here rather than hard-coding it, so a
deployment can tune initial capacities or turn on structural validation after
every mutation without touching code.

Fields
──────
log_level             : Structlog log level
log_format            : ``json`` or ``console``
initial_capacity      : Slots allocated by the first growth of an empty dynamic buffer
growth_factor         : Multiplier applied to capacity when a dynamic buffer grows
max_load_factor       : Fraction of HashMap slots that may be occupied before growth
validate_on_mutation  : Run ``validate()`` after every mutating operation (debug aid)

Examples:
    >>> from ccc.core.settings import get_settings
    >>> get_settings().initial_capacity
    8

Tags:
    settings, configuration, pydantic, ccc
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CccSettings(BaseSettings):
    """Container trait layer configuration.

    All fields can be set via ``CCC_*`` environment variables (e.g.
    ``CCC_GROWTH_FACTOR=1.5``) or a ``.env`` file.
    """

    model_config = SettingsConfigDict(
        env_prefix="CCC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    # ── Growth policy ────────────────────────────────────────────
    initial_capacity: int = Field(default=8, ge=1)
    growth_factor: float = Field(default=2.0, gt=1.0)
    max_load_factor: float = Field(default=0.75, gt=0.0, lt=1.0)

    # ── Debugging ────────────────────────────────────────────────
    validate_on_mutation: bool = Field(default=False)

    @field_validator("log_format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        if value not in ("json", "console"):
            raise ValueError(f"log_format must be 'json' or 'console', got {value!r}")
        return value

    def grow(self, capacity: int, needed: int) -> int:
        """Return the capacity to grow to so that ``needed`` slots fit."""
        new_capacity = max(capacity, self.initial_capacity)
        while new_capacity < needed:
            new_capacity = max(int(new_capacity * self.growth_factor), new_capacity + 1)
        return new_capacity


_settings_cache: dict[str, CccSettings] = {}


def get_settings(*, _force_reload: bool = False) -> CccSettings:
    """Load, validate, and cache a :class:`CccSettings` instance."""
    if _force_reload or "default" not in _settings_cache:
        _settings_cache["default"] = CccSettings()
    return _settings_cache["default"]


def reset_settings() -> None:
    """Drop the cached settings (for tests)."""
    _settings_cache.clear()


__all__ = [
    "CccSettings",
    "get_settings",
    "reset_settings",
]
