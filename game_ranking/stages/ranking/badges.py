"""
Explanation badges for scored games (e.g. matches_your_genres, highly_rated).

Used by callers to surface at most two reasons per recommended game.
"""

from typing import List

from ...models.scoring import ScoredGame


def get_badges(scored: ScoredGame) -> List[str]:
    """
    Signal-based badges for a scored game (max 2).

    Adds badges when a raw signal clears its threshold, in a fixed priority
    order; returns up to two badges.
    """
    badges = []
    b = scored.breakdown
    if b.genre_affinity >= 0.7:
        badges.append("matches_your_genres")
    if b.favourite_affinity >= 0.9:
        badges.append("like_your_favourites")
    if b.community_rating >= 0.6:
        badges.append("highly_rated")
    if b.age_band_popularity >= 7.0:
        badges.append("popular_with_age_group")
    if b.recency_boost >= 0.8:
        badges.append("new_release")
    return badges[:2]
