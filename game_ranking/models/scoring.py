"""
Scoring model — ScoredGame and its per-signal breakdown.

Every score is explainable: ScoredGame.score equals
breakdown.weighted_total(config.weights) for the config that produced it.
"""

from pydantic import BaseModel

from .config import ScoringWeights
from .game import Game


class ScoreBreakdown(BaseModel):
    """Raw (unweighted) value of every scoring signal for one game."""

    genre_affinity: float = 0.0
    age_band_popularity: float = 0.0
    engagement_similarity: float = 0.0
    favourite_affinity: float = 0.0
    community_rating: float = 0.0
    recency_boost: float = 0.0
    sponsored_boost: float = 0.0
    repetition_penalty: float = 0.0
    creation_recency_penalty: float = 0.0

    def weighted_total(self, weights: ScoringWeights) -> float:
        """Sum of weighted positive signals minus weighted penalties."""
        return (
            weights.genre_affinity * self.genre_affinity
            + weights.age_band_popularity * self.age_band_popularity
            + weights.engagement_similarity * self.engagement_similarity
            + weights.favourite_affinity * self.favourite_affinity
            + weights.community_rating * self.community_rating
            + weights.recency_boost * self.recency_boost
            + weights.sponsored_boost * self.sponsored_boost
            - weights.repetition_penalty * self.repetition_penalty
            - weights.creation_recency_penalty * self.creation_recency_penalty
        )


class ScoredGame(BaseModel):
    """A game with its composite score and all its scoring components."""

    game: Game
    score: float
    breakdown: ScoreBreakdown

    @property
    def game_id(self) -> str:
        return self.game.game_id
