"""Configuration models for glide-migrate.

Every heuristic constant used by the engine (confidence weights, complexity
thresholds, effort multipliers) lives here so the scoring logic can be tuned
from a `.glidemigrate.toml` file or environment variables.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_FILE_NAME = ".glidemigrate.toml"


class ScannerConfig(BaseModel):
    """Occurrence scanner configuration."""

    context_before: int = Field(
        default=2,
        ge=0,
        description="Lines of context captured before a matched line",
    )
    context_after: int = Field(
        default=5,
        ge=0,
        description="Lines of context captured after a matched line",
    )
    relevance_pattern: str = Field(
        default=r"redis|Redis|REDIS",
        description="Regex marking a line as dialect-relevant for complexity scoring",
    )


class ScoringConfig(BaseModel):
    """Confidence scorer configuration."""

    base_confidence: float = Field(default=0.5, description="Confidence of a single sighting")
    occurrence_weight: float = Field(default=0.1, description="Bonus per occurrence")
    occurrence_cap: float = Field(default=0.3, description="Maximum total occurrence bonus")
    context_bonus: float = Field(
        default=0.2,
        description="Bonus when any snippet contains a required context keyword",
    )
    min_confidence: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Patterns below this confidence are dropped by the detector",
    )


class ComplexityConfig(BaseModel):
    """Complexity score weights and bucket cut points."""

    simple_weight: float = Field(default=5)
    moderate_weight: float = Field(default=10)
    complex_weight: float = Field(default=20)
    occurrence_weight: float = Field(default=2, description="Score added per occurrence")
    size_divisor: float = Field(default=50, gt=0, description="Lines per size point")
    size_cap: float = Field(default=20, description="Maximum size contribution")
    density_weight: float = Field(default=30, description="Weight of relevant/total line ratio")
    max_score: float = Field(default=100)
    medium_at: float = Field(default=20, description="Scores at or above this are 'medium'")
    high_at: float = Field(default=50, description="Scores at or above this are 'high'")
    very_high_at: float = Field(default=80, description="Scores at or above this are 'very-high'")


class EffortConfig(BaseModel):
    """Effort estimate configuration (hours)."""

    low_base_hours: float = Field(default=8)
    medium_base_hours: float = Field(default=24)
    high_base_hours: float = Field(default=60)
    very_high_base_hours: float = Field(default=120)
    simple_pattern_hours: float = Field(default=2, description="Hours per simple occurrence")
    moderate_pattern_hours: float = Field(default=8, description="Hours per moderate occurrence")
    complex_pattern_hours: float = Field(default=16, description="Hours per complex occurrence")
    analysis_share: float = Field(default=0.2)
    conversion_share: float = Field(default=0.4)
    testing_share: float = Field(default=0.3)
    validation_share: float = Field(default=0.05)
    documentation_share: float = Field(default=0.05)
    confidence: float = Field(default=0.7, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _shares_sum_to_one(self) -> EffortConfig:
        total = (
            self.analysis_share
            + self.conversion_share
            + self.testing_share
            + self.validation_share
            + self.documentation_share
        )
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"Effort shares must sum to 1.0, got {total}")
        return self


class ConversionConfig(BaseModel):
    """Converted-file confidence heuristics (percent points)."""

    base_confidence: float = Field(default=90)
    complex_pattern_penalty: float = Field(default=15)
    rename_bonus: float = Field(default=2)
    skipped_step_penalty: float = Field(
        default=5,
        description="Penalty per conversion step whose target was not found",
    )
    min_confidence: float = Field(default=50)
    max_confidence: float = Field(default=100)


class PlanConfig(BaseModel):
    """Migration plan configuration."""

    default_plan_hours: int = Field(
        default=8,
        description="Plan duration floor when the source analysis has no effort estimate",
    )
    optimization_hours: int = Field(default=2, description="Hours added per optimization phase")
    phase_estimate: str = Field(default="2-4 hours")
    target_package: str = Field(default="@valkey/valkey-glide")


class GlideMigrateConfig(BaseSettings):
    """Main glide-migrate configuration."""

    model_config = SettingsConfigDict(
        env_prefix="GLIDE_MIGRATE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    version: str = Field(default="1.0", description="Config version")
    scanner: ScannerConfig = Field(default_factory=ScannerConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    complexity: ComplexityConfig = Field(default_factory=ComplexityConfig)
    effort: EffortConfig = Field(default_factory=EffortConfig)
    conversion: ConversionConfig = Field(default_factory=ConversionConfig)
    plan: PlanConfig = Field(default_factory=PlanConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> GlideMigrateConfig:
        """Load configuration from file and environment.

        The first file found is used:
        1. Provided config file path
        2. .glidemigrate.toml in current directory
        3. .glidemigrate.toml in home directory

        Values from that file are passed as init arguments and so override
        GLIDE_MIGRATE_* environment variables, which in turn override the
        built-in defaults.
        """
        config_data: dict[str, Any] = {}

        locations = []
        if config_path:
            locations.append(config_path)
        locations.extend(
            [
                Path.cwd() / CONFIG_FILE_NAME,
                Path.home() / CONFIG_FILE_NAME,
            ]
        )

        for loc in locations:
            if loc.exists():
                with open(loc, "rb") as f:
                    config_data = tomllib.load(f)
                break

        return cls(**config_data)


def get_default_config_toml() -> str:
    """Generate default .glidemigrate.toml content."""
    return """# glide-migrate configuration

version = "1.0"

[scanner]
context_before = 2
context_after = 5
relevance_pattern = "redis|Redis|REDIS"

[scoring]
base_confidence = 0.5
occurrence_weight = 0.1
occurrence_cap = 0.3
context_bonus = 0.2
min_confidence = 0.0  # Detector drops patterns below this

[complexity]
simple_weight = 5
moderate_weight = 10
complex_weight = 20
occurrence_weight = 2
size_divisor = 50
size_cap = 20
density_weight = 30
medium_at = 20
high_at = 50
very_high_at = 80

[effort]
low_base_hours = 8
medium_base_hours = 24
high_base_hours = 60
very_high_base_hours = 120
simple_pattern_hours = 2
moderate_pattern_hours = 8
complex_pattern_hours = 16
confidence = 0.7

[conversion]
base_confidence = 90
complex_pattern_penalty = 15
rename_bonus = 2
skipped_step_penalty = 5

[plan]
default_plan_hours = 8
optimization_hours = 2
target_package = "@valkey/valkey-glide"
"""
