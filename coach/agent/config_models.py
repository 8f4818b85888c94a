from __future__ import annotations

import logging
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator

from coach import ARGS_DIR

logger = logging.getLogger(__name__)


# =============================================================================
# CoachConfig (args/coach.yaml)
# =============================================================================

class LLMConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    classifier_model: str = Field(default="claude-3-5-haiku-20241022")
    generator_model: str = Field(default="claude-sonnet-4-20250514")
    max_tokens: int = Field(default=200, ge=1)
    temperature: float = Field(default=0.7, ge=0.0, le=1.0)
    classifier_temperature: float = Field(default=0.3, ge=0.0, le=1.0)
    timeout_seconds: float = Field(default=15.0, gt=0)
    api_key_env: str = Field(default="ANTHROPIC_API_KEY")


class MemorySettingsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    max_retained_turns: int = Field(default=50, ge=1)
    context_turns: int = Field(default=6, ge=0)
    max_users: int = Field(default=1000, ge=1)
    user_ttl_minutes: int = Field(default=1440, ge=1)

    @model_validator(mode="after")
    def _context_within_retention(self) -> MemorySettingsConfig:
        if self.context_turns > self.max_retained_turns:
            raise ValueError(
                f"context_turns ({self.context_turns}) cannot exceed "
                f"max_retained_turns ({self.max_retained_turns})"
            )
        return self


class PatternsConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    risk_hour_min_count: int = Field(default=2, ge=1)
    max_risk_hours: int = Field(default=3, ge=1)
    risk_hour_window: int = Field(default=1, ge=0)
    high_intensity_threshold: int = Field(default=7, ge=1, le=10)
    recent_window: int = Field(default=7, ge=1)
    absence_hours: int = Field(default=24, ge=1)


class SafetyConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    crisis_keywords: Optional[list[str]] = None
    restriction_keywords: Optional[list[str]] = None
    resources: Optional[list[dict[str, str]]] = None


class CircuitBreakerConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    failure_threshold: int = Field(default=5, ge=1)
    recovery_timeout: int = Field(default=60, ge=1)


class CoachConfig(BaseModel):
    model_config = ConfigDict(extra="allow")
    llm: LLMConfig = Field(default_factory=LLMConfig)
    memory: MemorySettingsConfig = Field(default_factory=MemorySettingsConfig)
    patterns: PatternsConfig = Field(default_factory=PatternsConfig)
    safety: SafetyConfig = Field(default_factory=SafetyConfig)
    circuit_breaker: CircuitBreakerConfig = Field(default_factory=CircuitBreakerConfig)


# =============================================================================
# load_and_validate
# =============================================================================

_CONFIG_MAP: dict[str, type[BaseModel]] = {
    "coach": CoachConfig,
}


def load_and_validate(config_name: str, model_class: type[BaseModel] | None = None) -> BaseModel:
    if model_class is None:
        model_class = _CONFIG_MAP.get(config_name)
        if model_class is None:
            raise ValueError(f"Unknown config: {config_name}. Available: {list(_CONFIG_MAP.keys())}")

    yaml_path = ARGS_DIR / f"{config_name}.yaml"

    try:
        if yaml_path.exists():
            with open(yaml_path) as f:
                raw = yaml.safe_load(f) or {}
        else:
            raw = {}

        return model_class.model_validate(raw)
    except Exception as e:
        logger.warning(f"Config validation failed for {config_name}: {e}, using defaults")
        return model_class()


def load_coach_config() -> CoachConfig:
    """Load args/coach.yaml, falling back to defaults."""
    return load_and_validate("coach")
