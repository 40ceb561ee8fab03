"""
Pipeline orchestrator — runs candidate generation, eligibility, scoring,
diversity, sponsored allocation, and bucketing to produce the output buckets.

The main entry point is RecommendationEngine.generate_recommendations. Charts
are served by the same engine through generate_chart but do not depend on the
personalization pipeline.

An engine never changes config after construction: with_config() builds a new
engine so in-flight calls keep a single consistent config.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from ..charts.ranker import DEFAULT_CHART_LIMIT, DEFAULT_MAX_CONCURRENCY, ChartRanker
from ..charts.sources import ChartMetricsSource
from ..models.config import RankingConfig, resolve_config
from ..models.game import AgeBand, Game, Platform, ensure_game_by_id
from ..models.output import ChartEntry, ChartType, RecommendationResult
from ..models.scoring import ScoredGame
from ..models.user import UserContext, UserHistory
from .buckets import BucketOrganizer
from .candidate_pool import CandidateGenerator, CandidateSource
from .diversity import DiversityPass
from .eligibility import EligibilityFilter
from .ranking import ScoringEngine
from .sponsored import SponsoredAllocator

logger = logging.getLogger(__name__)

# Size of the popular-by-age and new-and-trending sections.
SECTION_SIZE = 20


class RecommendationEngine:
    """
    Personalized buckets and charts for one immutable config.

    Args:
        config: ranking config (DEFAULT_CONFIG when None).
        candidate_source: precomputed candidate tables.
        chart_source: aggregated chart metrics.
        game_lookup: resolves game ids (history lists, chart entries) to games;
            values may be Game models or raw catalog dicts.
        sponsored_enabled: include the sponsored candidate source.
        max_chart_concurrency: max concurrent metrics fetches per chart.
        chart_fetch_timeout: optional per-fetch timeout in seconds.
    """

    def __init__(
        self,
        config: Optional[RankingConfig],
        candidate_source: CandidateSource,
        chart_source: ChartMetricsSource,
        game_lookup: Optional[Mapping[str, Union[Game, Dict[str, Any]]]] = None,
        sponsored_enabled: bool = True,
        max_chart_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        chart_fetch_timeout: Optional[float] = None,
    ):
        self._config = resolve_config(config)
        self._candidate_source = candidate_source
        self._chart_source = chart_source
        self._game_lookup = ensure_game_by_id(game_lookup) if game_lookup is not None else None
        self._sponsored_enabled = sponsored_enabled
        self._max_chart_concurrency = max_chart_concurrency
        self._chart_fetch_timeout = chart_fetch_timeout

        self._candidates = CandidateGenerator(candidate_source, sponsored_enabled)
        self._eligibility = EligibilityFilter.from_config(self._config)
        self._scoring = ScoringEngine(self._config, self._game_lookup)
        self._diversity = DiversityPass(self._config)
        self._sponsored = SponsoredAllocator(self._config.max_sponsored_per_list)
        self._buckets = BucketOrganizer()
        self._charts = ChartRanker(
            chart_source,
            max_concurrency=max_chart_concurrency,
            fetch_timeout=chart_fetch_timeout,
        )

    @property
    def config(self) -> RankingConfig:
        return self._config

    def with_config(
        self,
        overrides: Union[RankingConfig, Dict[str, Any]],
    ) -> "RecommendationEngine":
        """
        New engine with a replaced or overlaid config; this engine is untouched.

        A RankingConfig replaces the config; a dict is deep-merged onto it.
        """
        if isinstance(overrides, RankingConfig):
            new_config = overrides
        else:
            new_config = self._config.with_overrides(overrides)
        return RecommendationEngine(
            new_config,
            self._candidate_source,
            self._chart_source,
            game_lookup=self._game_lookup,
            sponsored_enabled=self._sponsored_enabled,
            max_chart_concurrency=self._max_chart_concurrency,
            chart_fetch_timeout=self._chart_fetch_timeout,
        )

    async def generate_recommendations(
        self,
        user: UserContext,
        history: Optional[UserHistory] = None,
        now: Optional[datetime] = None,
    ) -> RecommendationResult:
        """
        Run the full personalization pipeline for one user.

        Returns the ordered buckets plus diversity diagnostics for the
        personalized list. Source failures propagate; nothing is fabricated.
        """
        history = history if history is not None else UserHistory()
        now = now if now is not None else datetime.now(timezone.utc)

        # Stage 1: candidates
        candidates = await self._candidates.generate_candidates(user)

        # Stage 2: eligibility and safety
        eligible = self._eligibility.filter_eligible(candidates, user)

        # Stage 3: scoring
        scored = self._scoring.score_games(eligible, user, history, now)

        # Stage 4: diversity
        diversified, diagnostics = self._diversity.diversify_with_diagnostics(scored)

        # Stage 5: sponsored allocation (only eligible, already-scored games)
        sponsored = [s for s in scored if s.game.is_sponsored]
        personalized = self._sponsored.inject_sponsored(diversified, sponsored)

        # Stage 6: buckets
        popular = await self._popular_games(user, history, now)
        trending = await self._trending_games(user, history, now)
        buckets = self._buckets.organize_buckets(personalized, popular, trending, sponsored)

        logger.info(
            "[pipeline] RECOMMENDATIONS candidates=%s eligible=%s personalized=%s buckets=%s diversity_ok=%s",
            len(candidates), len(eligible), len(personalized), len(buckets), diagnostics.ok,
        )
        return RecommendationResult(buckets=buckets, diversity=diagnostics)

    async def generate_chart(
        self,
        chart_type: Union[ChartType, str],
        age_band: AgeBand,
        platform: Platform,
        limit: int = DEFAULT_CHART_LIMIT,
        genre_id: Optional[int] = None,
    ) -> List[ChartEntry]:
        """Generate a specific chart; see ChartRanker.generate_chart."""
        return await self._charts.generate_chart(chart_type, age_band, platform, limit, genre_id)

    # -------------------------------------------------------------------------
    # Section helpers
    # -------------------------------------------------------------------------

    def _score_in_order(
        self,
        games: List[Game],
        user: UserContext,
        history: UserHistory,
        now: datetime,
    ) -> List[ScoredGame]:
        """Eligible games scored, kept in the given order (first occurrence wins)."""
        eligible = self._eligibility.filter_eligible(games, user)
        by_id = {
            s.game.game_id: s
            for s in self._scoring.score_games(eligible, user, history, now)
        }
        ordered = []
        for game in eligible:
            scored = by_id.pop(game.game_id, None)
            if scored is not None:
                ordered.append(scored)
        return ordered

    async def _popular_games(
        self,
        user: UserContext,
        history: UserHistory,
        now: datetime,
    ) -> List[ScoredGame]:
        games = await self._candidates.popular_by_age_band(user.age_band, SECTION_SIZE)
        return self._score_in_order(games, user, history, now)

    async def _trending_games(
        self,
        user: UserContext,
        history: UserHistory,
        now: datetime,
    ) -> List[ScoredGame]:
        """Top Trending chart for the user's band/platform, resolved and safety-filtered."""
        if self._game_lookup is None:
            logger.debug("[pipeline] TRENDING_SKIPPED no game_lookup")
            return []
        entries = await self._charts.generate_top_trending(
            user.age_band, user.platform, SECTION_SIZE
        )
        games = []
        missing = 0
        for entry in entries:
            game = self._game_lookup.get(entry.game_id)
            if game is None:
                missing += 1
                continue
            games.append(game)
        if missing:
            logger.warning(
                "[pipeline] TRENDING_GAME_UNRESOLVED missing=%s total=%s",
                missing, len(entries),
            )
        return self._score_in_order(games, user, history, now)
