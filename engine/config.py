"""Central configuration for the accommodation search engine.

This module uses Pydantic Settings for validation and env management.
"""
from __future__ import annotations

import os
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_max_workers() -> int:
    # Same default ThreadPoolExecutor picks for itself
    return min(32, (os.cpu_count() or 1) + 4)


class SearchSettings(BaseSettings):
    """Ranking pipeline configuration."""
    model_config = SettingsConfigDict(env_prefix="SEARCH_", extra="ignore")

    max_workers: int = Field(
        default_factory=_default_max_workers,
        ge=1,
        le=256,
        description="Upper bound on concurrent scoring threads per request",
    )
    parallel_threshold: int = Field(
        default=64,
        ge=0,
        description="Corpora smaller than this are scored on the calling thread",
    )
    ngram_sizes: list[int] = Field(
        default_factory=lambda: [2, 3, 4],
        description="Substring lengths used by the approximate match index",
    )
    deterministic_ties: bool = Field(
        default=True,
        description="Order equal scores by candidate id instead of arrival order",
    )

    @field_validator("ngram_sizes")
    @classmethod
    def validate_ngram_sizes(cls, v: list[int]) -> list[int]:
        if not v:
            raise ValueError("ngram_sizes must not be empty")
        if any(n < 1 or n > 8 for n in v):
            raise ValueError("ngram sizes must be between 1 and 8")
        return sorted(set(v))


class ScoringSettings(BaseSettings):
    """Relevance weights for the candidate scorer."""
    model_config = SettingsConfigDict(env_prefix="SCORING_", extra="ignore")

    name_weight: int = Field(default=30, ge=0, le=100)
    type_weight: int = Field(default=20, ge=0, le=100)
    rating_weight: int = Field(default=15, ge=0, le=100)
    province_weight: int = Field(default=13, ge=0, le=100)
    district_weight: int = Field(default=8, ge=0, le=100)
    ward_weight: int = Field(default=1, ge=0, le=100)
    benefit_points: int = Field(default=4, ge=0, le=100, description="Points per matching benefit")
    benefit_cap: int = Field(default=12, ge=0, le=100, description="Maximum total benefit points")
    benefit_similarity_threshold: float = Field(default=0.7, ge=0.0, le=1.0)

    @property
    def max_score(self) -> int:
        return (
            self.name_weight
            + self.type_weight
            + self.rating_weight
            + self.province_weight
            + self.district_weight
            + self.ward_weight
            + self.benefit_cap
        )


class LoggingSettings(BaseSettings):
    """Logging configuration."""
    model_config = SettingsConfigDict(env_prefix="LOG_", extra="ignore")

    level: str = Field(default="INFO")
    format: Literal["json", "text"] = Field(default="json")
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Main application settings."""
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Sub-configs
    search: SearchSettings = Field(default_factory=SearchSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()
