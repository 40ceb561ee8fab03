"""
Per-game scoring signals.

Each signal is a pure function of the game, the user context/history, the
config, and a fixed reference time. Positive signals are boosts; repetition
and creation recency are penalties (subtracted by the composite score).
"""

from datetime import datetime
from typing import Mapping, Optional

from ...models.config import RankingConfig
from ...models.game import AgeBand, Game, GenreVector
from ...models.user import UserHistory
from ...utils.scores import community_rating, days_since, exponential_decay, log_popularity
from ...utils.similarity import cosine_similarity
from .similarity import history_similarity

# Favourites count 50% more than likes / long plays.
FAVOURITE_MULTIPLIER = 1.5


def genre_affinity(user_vector: GenreVector, game_vector: GenreVector) -> float:
    return cosine_similarity(user_vector, game_vector)


def age_band_popularity(game: Game, age_band: AgeBand) -> float:
    """Log-scaled play count for the user's age band."""
    return log_popularity(game.plays_for(age_band))


def engagement_similarity(
    game: Game,
    history: UserHistory,
    game_lookup: Optional[Mapping[str, Game]],
) -> float:
    """Mean of similarity to long-played games and similarity to liked games."""
    long_play = history_similarity(game, history.long_play_games, game_lookup)
    liked = history_similarity(game, history.liked_games, game_lookup)
    return (long_play + liked) / 2


def favourite_affinity(
    game: Game,
    history: UserHistory,
    game_lookup: Optional[Mapping[str, Game]],
) -> float:
    return FAVOURITE_MULTIPLIER * history_similarity(game, history.favourited_games, game_lookup)


def game_community_rating(game: Game) -> float:
    return community_rating(game.likes, game.dislikes)


def recency_boost(game: Game, config: RankingConfig, now: datetime) -> float:
    return exponential_decay(days_since(game.release_date, now), config.recency_decay_days)


def sponsored_boost(game: Game, config: RankingConfig) -> float:
    """Sponsored amount times multiplier, capped at max_sponsored_boost."""
    if not game.is_sponsored or game.sponsored_amount <= 0:
        return 0.0
    raw_boost = game.sponsored_amount * config.sponsored_amount_multiplier
    return min(raw_boost, config.max_sponsored_boost)


def repetition_penalty(game: Game, history: UserHistory) -> float:
    return 1.0 if game.game_id in history.heavily_played else 0.0


def creation_recency_penalty(game: Game, config: RankingConfig, now: datetime) -> float:
    """
    Penalty for newly created games while they prove themselves.

    1.0 inside the grace period, 0 from creation_penalty_max_days on,
    linear decay in between.
    """
    age = days_since(game.creation_date, now)
    grace = config.creation_grace_period_days
    max_days = config.creation_penalty_max_days
    if age < grace:
        return 1.0
    if age >= max_days:
        return 0.0
    return 1.0 - (age - grace) / (max_days - grace)
