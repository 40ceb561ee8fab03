"""
Game Ranking Engine — safety-gated recommendations and popularity charts

Single entry point for the game_ranking package:
- models/: RankingConfig, Game, UserContext, ScoredGame, buckets, chart entries
- stages/: eligibility, scoring (ranking/), diversity, sponsored, buckets, orchestrator
- charts/: ChartRanker and per-chart formulas
- computed_params: derived values for a config
"""

from .charts import ChartMetricsSource, ChartRanker
from .computed_params import compute_parameters
from .errors import GameRankingError, InvalidChartRequest, SourceUnavailableError
from .models import (
    DEFAULT_CONFIG,
    AgeBand,
    ChartEntry,
    ChartType,
    DiversityDiagnostics,
    DiversityRules,
    Game,
    GameFeature,
    GameMetrics,
    Platform,
    RankingConfig,
    RecommendationBucket,
    RecommendationResult,
    ScoreBreakdown,
    ScoredGame,
    ScoringWeights,
    UserContext,
    UserHistory,
    load_config,
    resolve_config,
)
from .stages import (
    BucketOrganizer,
    CandidateGenerator,
    CandidateSource,
    DiversityPass,
    EligibilityFilter,
    RecommendationEngine,
    ScoringEngine,
    SponsoredAllocator,
    get_badges,
    merge_buckets,
)

__all__ = [
    "DEFAULT_CONFIG",
    "AgeBand",
    "BucketOrganizer",
    "CandidateGenerator",
    "CandidateSource",
    "ChartEntry",
    "ChartMetricsSource",
    "ChartRanker",
    "ChartType",
    "DiversityDiagnostics",
    "DiversityPass",
    "DiversityRules",
    "EligibilityFilter",
    "Game",
    "GameFeature",
    "GameMetrics",
    "GameRankingError",
    "InvalidChartRequest",
    "Platform",
    "RankingConfig",
    "RecommendationBucket",
    "RecommendationEngine",
    "RecommendationResult",
    "ScoreBreakdown",
    "ScoredGame",
    "ScoringEngine",
    "ScoringWeights",
    "SourceUnavailableError",
    "SponsoredAllocator",
    "UserContext",
    "UserHistory",
    "compute_parameters",
    "get_badges",
    "load_config",
    "merge_buckets",
    "resolve_config",
]
