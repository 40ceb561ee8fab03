"""
Chart ranker — algorithmic charts over aggregated metrics.

Independent of the personalization pipeline. Every chart has the same shape:
fetch the age/platform-scoped games, pre-filter, fetch metrics per game
concurrently (bounded by max_concurrency), score, sort by score desc then
game_id asc, slice to limit, and assign ranks 1..N.

The public entry point is ChartRanker.generate_chart; each chart also has a
dedicated generate_* coroutine.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Union

from ..errors import InvalidChartRequest, SourceUnavailableError
from ..models.game import AgeBand, Game, Platform
from ..models.metrics import GameMetrics
from ..models.output import ChartEntry, ChartType
from .formulas import CHART_FORMULAS, within_release_window
from .sources import ChartMetricsSource

logger = logging.getLogger(__name__)

DEFAULT_CHART_LIMIT = 50
DEFAULT_MAX_CONCURRENCY = 8

GamePredicate = Callable[[Game], bool]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_chart_type(chart_type: Union[ChartType, str]) -> ChartType:
    """Resolve a chart type or its name; unknown values are caller errors."""
    try:
        return ChartType(chart_type)
    except ValueError:
        raise InvalidChartRequest(f"Unknown chart type: {chart_type}") from None


def _dedupe(games: List[Game]) -> List[Game]:
    seen = set()
    out = []
    for game in games:
        if game.game_id in seen:
            continue
        seen.add(game.game_id)
        out.append(game)
    return out


class ChartRanker:
    """
    Computes charts from a ChartMetricsSource.

    Args:
        source: metrics source (both calls may fail; failures propagate).
        max_concurrency: max in-flight metrics_for calls per chart.
        fetch_timeout: optional per-call timeout in seconds; a timeout raises
            SourceUnavailableError.
        clock: returns "now" for release-window math (UTC).
    """

    def __init__(
        self,
        source: ChartMetricsSource,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        fetch_timeout: Optional[float] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.source = source
        self.max_concurrency = max_concurrency
        self.fetch_timeout = fetch_timeout
        self.clock = clock or _utc_now

    # -------------------------------------------------------------------------
    # Public charts
    # -------------------------------------------------------------------------

    async def generate_top_trending(
        self, age_band: AgeBand, platform: Platform, limit: int = DEFAULT_CHART_LIMIT
    ) -> List[ChartEntry]:
        """Games with the fastest week-over-week play growth."""
        return await self._build_chart(ChartType.TOP_TRENDING, age_band, platform, limit)

    async def generate_up_and_coming(
        self, age_band: AgeBand, platform: Platform, limit: int = DEFAULT_CHART_LIMIT
    ) -> List[ChartEntry]:
        """New games (released in the last 30 days) gaining traction."""
        now = self.clock()
        return await self._build_chart(
            ChartType.UP_AND_COMING,
            age_band,
            platform,
            limit,
            prefilter=lambda g: within_release_window(g, now),
            now=now,
        )

    async def generate_top_playing_now(
        self, age_band: AgeBand, platform: Platform, limit: int = DEFAULT_CHART_LIMIT
    ) -> List[ChartEntry]:
        return await self._build_chart(ChartType.TOP_PLAYING_NOW, age_band, platform, limit)

    async def generate_top_replayed(
        self, age_band: AgeBand, platform: Platform, limit: int = DEFAULT_CHART_LIMIT
    ) -> List[ChartEntry]:
        """Sessions per unique player; games without players are left off."""
        return await self._build_chart(ChartType.TOP_REPLAYED, age_band, platform, limit)

    async def generate_top_earning(
        self, age_band: AgeBand, platform: Platform, limit: int = DEFAULT_CHART_LIMIT
    ) -> List[ChartEntry]:
        return await self._build_chart(ChartType.TOP_EARNING, age_band, platform, limit)

    async def generate_top_rated(
        self, age_band: AgeBand, platform: Platform, limit: int = DEFAULT_CHART_LIMIT
    ) -> List[ChartEntry]:
        """Community rating weighted by reaction volume; games without reactions are left off."""
        return await self._build_chart(ChartType.TOP_RATED, age_band, platform, limit)

    async def generate_trending_in_genre(
        self,
        genre_id: int,
        age_band: AgeBand,
        platform: Platform,
        limit: int = DEFAULT_CHART_LIMIT,
    ) -> List[ChartEntry]:
        """Top Trending restricted to games whose genre vector contains genre_id."""
        if genre_id is None:
            raise InvalidChartRequest("genre_id is required for TRENDING_IN_GENRE chart")
        return await self._build_chart(
            ChartType.TRENDING_IN_GENRE,
            age_band,
            platform,
            limit,
            prefilter=lambda g: genre_id in g.genre_vector,
        )

    async def generate_chart(
        self,
        chart_type: Union[ChartType, str],
        age_band: AgeBand,
        platform: Platform,
        limit: int = DEFAULT_CHART_LIMIT,
        genre_id: Optional[int] = None,
    ) -> List[ChartEntry]:
        """
        Dispatch to the chart for chart_type.

        Raises InvalidChartRequest for an unknown chart type or a
        TRENDING_IN_GENRE request without genre_id, before any source call.
        """
        kind = parse_chart_type(chart_type)
        if kind == ChartType.TRENDING_IN_GENRE:
            if genre_id is None:
                raise InvalidChartRequest("genre_id is required for TRENDING_IN_GENRE chart")
            return await self.generate_trending_in_genre(genre_id, age_band, platform, limit)
        generators = {
            ChartType.TOP_TRENDING: self.generate_top_trending,
            ChartType.UP_AND_COMING: self.generate_up_and_coming,
            ChartType.TOP_PLAYING_NOW: self.generate_top_playing_now,
            ChartType.TOP_REPLAYED: self.generate_top_replayed,
            ChartType.TOP_EARNING: self.generate_top_earning,
            ChartType.TOP_RATED: self.generate_top_rated,
        }
        return await generators[kind](age_band, platform, limit)

    # -------------------------------------------------------------------------
    # Shared pipeline
    # -------------------------------------------------------------------------

    async def _build_chart(
        self,
        chart_type: ChartType,
        age_band: AgeBand,
        platform: Platform,
        limit: int,
        prefilter: Optional[GamePredicate] = None,
        now: Optional[datetime] = None,
    ) -> List[ChartEntry]:
        if limit < 0:
            raise InvalidChartRequest(f"limit must be >= 0, got {limit}")
        if limit == 0:
            return []
        now = now if now is not None else self.clock()
        formula = CHART_FORMULAS[chart_type]

        # --- 1. Scoped candidate set ---
        games = _dedupe(await self.source.items_for(age_band, platform))
        if prefilter is not None:
            games = [g for g in games if prefilter(g)]

        # --- 2. Metrics fan-out ---
        metrics = await self._fetch_all_metrics(games, age_band, platform)

        # --- 3. Score, skipping games the formula leaves off ---
        scored = []
        for game, game_metrics in zip(games, metrics):
            score = formula(game, game_metrics, now)
            if score is not None:
                scored.append((game.game_id, score))

        # --- 4. Sort (score desc, game_id asc), slice, rank ---
        scored.sort(key=lambda e: (-e[1], e[0]))
        entries = [
            ChartEntry(game_id=game_id, score=score, rank=i + 1)
            for i, (game_id, score) in enumerate(scored[:limit])
        ]
        logger.debug(
            "[charts] BUILT chart=%s age_band=%s platform=%s candidates=%s entries=%s",
            chart_type.value, age_band.value, platform.value, len(games), len(entries),
        )
        return entries

    async def _fetch_all_metrics(
        self,
        games: List[Game],
        age_band: AgeBand,
        platform: Platform,
    ) -> List[GameMetrics]:
        """
        Fetch metrics for every game, at most max_concurrency at a time.

        Results are in input order regardless of completion order. If any
        fetch fails, the outstanding fetches are cancelled and the error
        propagates.
        """
        if not games:
            return []
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _fetch(game: Game) -> GameMetrics:
            async with semaphore:
                return await self._fetch_one(game.game_id, age_band, platform)

        tasks = [asyncio.ensure_future(_fetch(g)) for g in games]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            # Drain siblings so their errors and cancellations are retrieved.
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _fetch_one(
        self,
        game_id: str,
        age_band: AgeBand,
        platform: Platform,
    ) -> GameMetrics:
        call = self.source.metrics_for(game_id, age_band, platform)
        if self.fetch_timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self.fetch_timeout)
        except asyncio.TimeoutError as exc:
            logger.warning(
                "[charts] METRICS_TIMEOUT game_id=%s timeout=%s", game_id, self.fetch_timeout
            )
            raise SourceUnavailableError(
                f"metrics_for timed out after {self.fetch_timeout}s for game {game_id}"
            ) from exc
