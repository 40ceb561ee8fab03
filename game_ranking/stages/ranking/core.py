"""
Scoring engine: composite score per eligible game from independent signals.

score = sum(weight * signal) over boosts - sum(weight * penalty) over penalties.
Output is sorted by score descending, ties broken by game_id ascending so the
order is reproducible and auditable.
"""

import logging
from datetime import datetime, timezone
from typing import List, Mapping, Optional

from ...models.config import DEFAULT_CONFIG, RankingConfig
from ...models.game import Game
from ...models.scoring import ScoreBreakdown, ScoredGame
from ...models.user import UserContext, UserHistory
from . import signals

logger = logging.getLogger(__name__)


def ranking_key(scored: ScoredGame):
    """Sort key: score descending, then game_id ascending."""
    return (-scored.score, scored.game.game_id)


def build_breakdown(
    game: Game,
    user: UserContext,
    history: UserHistory,
    config: RankingConfig,
    now: datetime,
    game_lookup: Optional[Mapping[str, Game]] = None,
) -> ScoreBreakdown:
    """Compute every raw signal for one game."""
    return ScoreBreakdown(
        genre_affinity=signals.genre_affinity(user.genre_vector, game.genre_vector),
        age_band_popularity=signals.age_band_popularity(game, user.age_band),
        engagement_similarity=signals.engagement_similarity(game, history, game_lookup),
        favourite_affinity=signals.favourite_affinity(game, history, game_lookup),
        community_rating=signals.game_community_rating(game),
        recency_boost=signals.recency_boost(game, config, now),
        sponsored_boost=signals.sponsored_boost(game, config),
        repetition_penalty=signals.repetition_penalty(game, history),
        creation_recency_penalty=signals.creation_recency_penalty(game, config, now),
    )


def build_scored_game(
    game: Game,
    user: UserContext,
    history: UserHistory,
    config: RankingConfig,
    now: datetime,
    game_lookup: Optional[Mapping[str, Game]] = None,
) -> ScoredGame:
    breakdown = build_breakdown(game, user, history, config, now, game_lookup)
    return ScoredGame(
        game=game,
        score=breakdown.weighted_total(config.weights),
        breakdown=breakdown,
    )


class ScoringEngine:
    """
    Scores eligible games for one user.

    game_lookup resolves history ids to full games for the engagement and
    favourite signals; without it those signals are 0.
    """

    def __init__(
        self,
        config: RankingConfig = DEFAULT_CONFIG,
        game_lookup: Optional[Mapping[str, Game]] = None,
    ):
        self.config = config
        self.game_lookup = game_lookup

    def score_games(
        self,
        eligible_games: List[Game],
        user: UserContext,
        history: Optional[UserHistory] = None,
        now: Optional[datetime] = None,
    ) -> List[ScoredGame]:
        """
        Score all eligible games, sorted by score desc then game_id asc.

        now is captured once so every game in the call sees the same clock.
        """
        history = history if history is not None else UserHistory()
        now = now if now is not None else datetime.now(timezone.utc)

        scored = [
            build_scored_game(game, user, history, self.config, now, self.game_lookup)
            for game in eligible_games
        ]
        scored.sort(key=ranking_key)

        logger.debug(
            "[scoring] SCORED count=%s top=%s",
            len(scored), scored[0].game.game_id if scored else None,
        )
        return scored
