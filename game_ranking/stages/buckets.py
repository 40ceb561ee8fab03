"""
Output bucketing — groups ranked lists into named, ordered display sections.

Buckets carry only game ids: scores and order metadata are dropped, the
bucket is a display contract, not a scoring artifact.
"""

from typing import List, Set

from ..models.output import RecommendationBucket
from ..models.scoring import ScoredGame

RECOMMENDED_FOR_YOU = ("recommended_for_you", "Recommended For You")
POPULAR_BY_AGE = ("popular_by_age", "Popular in Your Age Group")
NEW_AND_TRENDING = ("new_and_trending", "New & Trending")
SPONSORED_EVENTS = ("sponsored_events", "Sponsored Events")


def create_bucket(bucket_id: str, title: str, games: List[ScoredGame]) -> RecommendationBucket:
    """Create a bucket from a list of scored games, keeping their order."""
    return RecommendationBucket(
        id=bucket_id,
        title=title,
        games=[s.game.game_id for s in games],
    )


def merge_buckets(buckets: List[RecommendationBucket]) -> List[RecommendationBucket]:
    """
    Remove duplicate game ids across buckets while preserving order.

    A game stays in the first bucket it appears in; buckets left empty are
    dropped. Input buckets are not mutated.
    """
    seen: Set[str] = set()
    merged: List[RecommendationBucket] = []
    for bucket in buckets:
        unique = []
        for game_id in bucket.games:
            if game_id in seen:
                continue
            seen.add(game_id)
            unique.append(game_id)
        if unique:
            merged.append(bucket.model_copy(update={"games": unique}))
    return merged


class BucketOrganizer:
    """Builds the fixed set of output sections."""

    def organize_buckets(
        self,
        personalized: List[ScoredGame],
        popular_by_age: List[ScoredGame],
        trending: List[ScoredGame],
        sponsored: List[ScoredGame],
    ) -> List[RecommendationBucket]:
        """
        Buckets in fixed order: recommended_for_you, popular_by_age,
        new_and_trending, sponsored_events. Empty sources produce no bucket.
        """
        sections = [
            (RECOMMENDED_FOR_YOU, personalized),
            (POPULAR_BY_AGE, popular_by_age),
            (NEW_AND_TRENDING, trending),
            (SPONSORED_EVENTS, sponsored),
        ]
        return [
            create_bucket(bucket_id, title, games)
            for (bucket_id, title), games in sections
            if games
        ]
