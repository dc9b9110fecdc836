"""
Runtime settings for step resolution.

Settings are a validated pydantic model. Values come from defaults,
then from ``STEPWISE_*`` environment variables (optionally loaded
from a ``.env`` file with python-dotenv).
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import structlog
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from stepwise.errors import ConfigurationError

logger = structlog.get_logger(__name__)

ENV_PREFIX = "STEPWISE_"


class Settings(BaseModel):
    """Thresholds, limits and timeouts used across the resolution pipeline."""

    intelligence_enabled: bool = True

    # Semantic matcher confidence thresholds
    click_threshold: float = 50.0
    fill_threshold: float = 50.0
    select_threshold: float = 50.0
    verify_threshold: float = 40.0

    # Candidate pool caps per matcher
    click_max_candidates: int = Field(default=30, ge=1)
    fill_max_candidates: int = Field(default=30, ge=1)
    select_max_candidates: int = Field(default=20, ge=1)
    verify_max_candidates: int = Field(default=50, ge=1)

    # Broad-search locator
    smart_locator_min_score: float = 30.0
    poll_interval_seconds: float = Field(default=0.5, gt=0)
    element_wait_timeout_seconds: float = Field(default=10.0, ge=0)
    window_timeout_seconds: float = Field(default=10.0, gt=0)

    # Context/config store
    username: str = ""
    password: SecretStr = SecretStr("")
    stored_values: dict[str, str] = Field(default_factory=dict)

    @field_validator("stored_values", mode="before")
    @classmethod
    def parse_stored_values(cls, v: Any) -> Any:
        """Accept ``key=value;key=value`` strings from the environment."""
        if isinstance(v, str):
            pairs: dict[str, str] = {}
            for chunk in v.split(";"):
                if not chunk.strip():
                    continue
                if "=" not in chunk:
                    raise ValueError(f"stored value '{chunk}' is not key=value")
                key, value = chunk.split("=", 1)
                pairs[key.strip()] = value.strip()
            return pairs
        return v

    def threshold_for(self, category: str) -> float:
        """Return the matcher threshold for an intent category name."""
        match category:
            case "fill":
                return self.fill_threshold
            case "select":
                return self.select_threshold
            case "verify":
                return self.verify_threshold
            case _:
                return self.click_threshold


def _env_overrides() -> dict[str, str]:
    overrides: dict[str, str] = {}
    for name in Settings.model_fields:
        raw = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None:
            overrides[name] = raw
    return overrides


def load_settings(env_file: str | Path | None = None) -> Settings:
    """
    Load settings from the environment.

    Args:
        env_file: Optional path to a ``.env`` file. When omitted, python-dotenv
            searches for ``.env`` from the working directory upward.

    Returns:
        Validated Settings instance

    Raises:
        ConfigurationError: If the env file is missing or a value is invalid
    """
    if env_file is not None:
        path = Path(env_file)
        if not path.is_file():
            raise ConfigurationError(f"Env file not found: {path}")
        load_dotenv(path, override=False)
    else:
        load_dotenv(find_dotenv(usecwd=True), override=False)

    overrides = _env_overrides()
    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid stepwise settings: {e}") from e

    logger.debug("Loaded settings", overrides=sorted(overrides))
    return settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return process-wide default settings loaded once from the environment."""
    return load_settings()
