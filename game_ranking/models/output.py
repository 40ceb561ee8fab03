"""
Output models — buckets, chart entries, and diversity diagnostics.

Buckets are the only externally visible output of the personalization path;
chart entries are the output of each chart query.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class RecommendationBucket(BaseModel):
    """Named, ordered section of game ids shown to the user."""

    id: str
    title: str
    games: List[str] = Field(default_factory=list)


class ChartType(str, Enum):
    TOP_TRENDING = "TOP_TRENDING"
    UP_AND_COMING = "UP_AND_COMING"
    TOP_PLAYING_NOW = "TOP_PLAYING_NOW"
    TOP_REPLAYED = "TOP_REPLAYED"
    TOP_EARNING = "TOP_EARNING"
    TOP_RATED = "TOP_RATED"
    TRENDING_IN_GENRE = "TRENDING_IN_GENRE"


class ChartEntry(BaseModel):
    """One chart row; rank is 1-based and contiguous within a chart."""

    game_id: str
    score: float
    rank: int


class DiversityDiagnostics(BaseModel):
    """
    Informational result of the post-diversity checks.

    Shortfalls never block output and never trigger a backfill.
    """

    unique_genres: int = 0
    min_genres: int = 0
    low_intensity_required: bool = False
    has_low_intensity: bool = False

    @property
    def genre_shortfall(self) -> bool:
        return self.unique_genres < self.min_genres

    @property
    def low_intensity_shortfall(self) -> bool:
        return self.low_intensity_required and not self.has_low_intensity

    @property
    def ok(self) -> bool:
        return not (self.genre_shortfall or self.low_intensity_shortfall)

    def messages(self) -> List[str]:
        """Human-readable warnings, empty when all checks pass."""
        out = []
        if self.genre_shortfall:
            out.append(
                f"Only {self.unique_genres} genres in recommendations (minimum: {self.min_genres})"
            )
        if self.low_intensity_shortfall:
            out.append("No low-intensity game in recommendations")
        return out


class RecommendationResult(BaseModel):
    """Buckets for one request plus the diversity diagnostics of the personalized list."""

    buckets: List[RecommendationBucket] = Field(default_factory=list)
    diversity: DiversityDiagnostics = Field(default_factory=DiversityDiagnostics)

    def bucket(self, bucket_id: str):
        """Bucket with the given id, or None."""
        for b in self.buckets:
            if b.id == bucket_id:
                return b
        return None
