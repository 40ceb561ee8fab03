"""
Per-chart scoring formulas.

Each formula maps (game, metrics, now) to a score, or None when the game
must be left off the chart (e.g. no players for the replay rate).

| Chart             | Score                                                      |
|-------------------|------------------------------------------------------------|
| TOP_TRENDING      | growth of plays_last_7_days over plays_prev_7_days         |
| UP_AND_COMING     | 0.4 * (1 - days/30) + 0.6 * ln(1 + plays_last_30_days)     |
| TOP_PLAYING_NOW   | current_sessions                                           |
| TOP_REPLAYED      | total_sessions / unique_players                            |
| TOP_EARNING       | total_revenue                                              |
| TOP_RATED         | community rating (ratio x volume confidence)               |
| TRENDING_IN_GENRE | TOP_TRENDING, genre-filtered upstream                      |
"""

from datetime import datetime
from typing import Callable, Dict, Optional

from ..models.game import Game
from ..models.metrics import GameMetrics
from ..models.output import ChartType
from ..utils.scores import community_rating, days_since, growth_rate, log_popularity

# Up & Coming only considers games released within this many days (inclusive).
UP_AND_COMING_WINDOW_DAYS = 30
UP_AND_COMING_RECENCY_WEIGHT = 0.4
UP_AND_COMING_ENGAGEMENT_WEIGHT = 0.6

ChartFormula = Callable[[Game, GameMetrics, datetime], Optional[float]]


def trending_score(game: Game, metrics: GameMetrics, now: datetime) -> Optional[float]:
    return growth_rate(metrics.plays_last_7_days, metrics.plays_prev_7_days)


def within_release_window(game: Game, now: datetime) -> bool:
    return days_since(game.release_date, now) <= UP_AND_COMING_WINDOW_DAYS


def up_and_coming_score(game: Game, metrics: GameMetrics, now: datetime) -> Optional[float]:
    """Weighted blend of release recency and 30-day engagement; None outside the window."""
    age = days_since(game.release_date, now)
    if age > UP_AND_COMING_WINDOW_DAYS:
        return None
    recency = 1 - age / UP_AND_COMING_WINDOW_DAYS
    engagement = log_popularity(metrics.plays_last_30_days)
    return UP_AND_COMING_RECENCY_WEIGHT * recency + UP_AND_COMING_ENGAGEMENT_WEIGHT * engagement


def playing_now_score(game: Game, metrics: GameMetrics, now: datetime) -> Optional[float]:
    return float(metrics.current_sessions)


def replayed_score(game: Game, metrics: GameMetrics, now: datetime) -> Optional[float]:
    if metrics.unique_players == 0:
        return None
    return metrics.total_sessions / metrics.unique_players


def earning_score(game: Game, metrics: GameMetrics, now: datetime) -> Optional[float]:
    return float(metrics.total_revenue)


def rated_score(game: Game, metrics: GameMetrics, now: datetime) -> Optional[float]:
    if metrics.likes + metrics.dislikes == 0:
        return None
    return community_rating(metrics.likes, metrics.dislikes)


CHART_FORMULAS: Dict[ChartType, ChartFormula] = {
    ChartType.TOP_TRENDING: trending_score,
    ChartType.UP_AND_COMING: up_and_coming_score,
    ChartType.TOP_PLAYING_NOW: playing_now_score,
    ChartType.TOP_REPLAYED: replayed_score,
    ChartType.TOP_EARNING: earning_score,
    ChartType.TOP_RATED: rated_score,
    ChartType.TRENDING_IN_GENRE: trending_score,
}
