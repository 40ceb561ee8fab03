"""Data models for the ranking engine."""

from .config import (
    CONFIG_SCHEMA_VERSION,
    DEFAULT_CONFIG,
    DiversityRules,
    RankingConfig,
    ScoringWeights,
    load_config,
    resolve_config,
)
from .game import AgeBand, Game, GameFeature, GenreVector, Platform, ensure_game_by_id, ensure_games
from .metrics import GameMetrics
from .output import (
    ChartEntry,
    ChartType,
    DiversityDiagnostics,
    RecommendationBucket,
    RecommendationResult,
)
from .scoring import ScoreBreakdown, ScoredGame
from .user import UserContext, UserHistory

__all__ = [
    "CONFIG_SCHEMA_VERSION",
    "DEFAULT_CONFIG",
    "AgeBand",
    "ChartEntry",
    "ChartType",
    "DiversityDiagnostics",
    "DiversityRules",
    "Game",
    "GameFeature",
    "GameMetrics",
    "GenreVector",
    "Platform",
    "RankingConfig",
    "RecommendationBucket",
    "RecommendationResult",
    "ScoreBreakdown",
    "ScoredGame",
    "ScoringWeights",
    "UserContext",
    "UserHistory",
    "ensure_game_by_id",
    "ensure_games",
    "load_config",
    "resolve_config",
]
