"""
Ranking configuration — scoring weights, safety threshold, and list rules.

RankingConfig defaults are defined here. Callers may pass a dict (e.g. loaded
from a JSON file); from_dict() merges it with these defaults. Configs are
frozen: with_overrides() returns a new config instead of mutating this one.
"""

import json
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

CONFIG_SCHEMA_VERSION = 2

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class ScoringWeights(BaseModel):
    """
    Multiplier per scoring signal.

    score = genre_affinity * w + age_band_popularity * w + engagement_similarity * w
          + favourite_affinity * w + community_rating * w + recency_boost * w
          + sponsored_boost * w - repetition_penalty * w - creation_recency_penalty * w
    """

    model_config = ConfigDict(frozen=True)

    genre_affinity: float = 1.0
    age_band_popularity: float = 0.8
    engagement_similarity: float = 0.9
    # Favourites are a stronger signal than likes; the 1.5x lift lives in the signal itself.
    favourite_affinity: float = 1.0
    community_rating: float = 0.6
    recency_boost: float = 0.5
    sponsored_boost: float = 0.3

    # Penalties are subtracted.
    repetition_penalty: float = 2.0
    creation_recency_penalty: float = 1.0


class DiversityRules(BaseModel):
    """Rules for the diversity pass over the score-sorted list."""

    model_config = ConfigDict(frozen=True)

    # Reported (never enforced) when fewer distinct genres survive the pass.
    min_genres: int = Field(default=2, ge=0)
    # Hard cap: no genre may appear in more than this many admitted games.
    max_per_genre: int = Field(default=5, ge=1)
    # Reported when no LOW_INTENSITY game survives the pass.
    require_low_intensity: bool = True
    # Reject a multiplayer game when every game admitted so far is multiplayer.
    avoid_all_multiplayer: bool = True


class RankingConfig(BaseModel):
    """Configuration for the ranking engine."""

    model_config = ConfigDict(frozen=True)

    schema_version: int = CONFIG_SCHEMA_VERSION

    weights: ScoringWeights = Field(default_factory=ScoringWeights)

    # -------------------------------------------------------------------------
    # Eligibility
    # -------------------------------------------------------------------------

    # Games with moderation_score below this are never scored.
    moderation_threshold: float = Field(default=0.8, ge=0.0, le=1.0)

    # -------------------------------------------------------------------------
    # Recency
    # recency_boost = exp(-days_since_release / recency_decay_days)
    # -------------------------------------------------------------------------

    recency_decay_days: float = Field(default=90.0, gt=0.0)

    # -------------------------------------------------------------------------
    # Creation recency penalty
    # Full penalty inside the grace period, linear decay to 0 at max days.
    # -------------------------------------------------------------------------

    creation_grace_period_days: int = Field(default=7, ge=0)
    creation_penalty_max_days: int = Field(default=30, gt=0)

    # -------------------------------------------------------------------------
    # Sponsorship
    # sponsored_boost = min(sponsored_amount * multiplier, max_sponsored_boost)
    # -------------------------------------------------------------------------

    # 0.001 means a 1000 sponsorship yields a 1.0 boost.
    sponsored_amount_multiplier: float = Field(default=0.001, ge=0.0)
    max_sponsored_boost: float = Field(default=2.0, ge=0.0)

    # -------------------------------------------------------------------------
    # Output sizing
    # -------------------------------------------------------------------------

    max_results: int = Field(default=50, gt=0)
    max_sponsored_per_list: int = Field(default=3, ge=0)

    diversity_rules: DiversityRules = Field(default_factory=DiversityRules)

    @model_validator(mode="after")
    def grace_period_before_max(self):
        if self.creation_grace_period_days >= self.creation_penalty_max_days:
            raise ValueError(
                "creation_grace_period_days must be less than creation_penalty_max_days, "
                f"got {self.creation_grace_period_days} >= {self.creation_penalty_max_days}"
            )
        return self

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "RankingConfig":
        """
        Create config from dictionary (e.g., loaded from JSON).

        Accepts snake_case or camelCase keys. A version 1 document (six weights,
        no creation penalty settings) is accepted; missing values take defaults.
        """
        flat = _normalize_keys(config_dict)
        version = flat.get("schema_version", 1)
        if version > CONFIG_SCHEMA_VERSION:
            raise ValueError(f"Unsupported config schema_version {version}")
        flat["schema_version"] = CONFIG_SCHEMA_VERSION
        allowed = set(cls.model_fields)
        filtered = {k: v for k, v in flat.items() if k in allowed}
        return cls.model_validate(filtered)

    def with_overrides(self, overrides: Dict[str, Any]) -> "RankingConfig":
        """Return a new config with overrides deep-merged onto this one."""
        merged = _deep_merge(self.model_dump(), _normalize_keys(overrides))
        return RankingConfig.from_dict(merged)


def _to_snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _normalize_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            (_to_snake(k) if isinstance(k, str) else k): _normalize_keys(v)
            for k, v in value.items()
        }
    return value


def _deep_merge(base: Dict[str, Any], overlay: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overlay.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


DEFAULT_CONFIG = RankingConfig()


def resolve_config(config: Optional["RankingConfig"]) -> "RankingConfig":
    """Return config or DEFAULT_CONFIG when none is provided."""
    return config if config is not None else DEFAULT_CONFIG


def load_config(path: Optional[Union[str, Path]]) -> RankingConfig:
    """Load a RankingConfig from a JSON file; no path means DEFAULT_CONFIG."""
    if path is None:
        return DEFAULT_CONFIG
    with open(path) as f:
        return RankingConfig.from_dict(json.load(f))
