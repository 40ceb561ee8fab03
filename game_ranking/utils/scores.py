"""
Score helpers — time, decay, popularity, and rating math shared by the
scoring engine and the chart ranker.
"""

import math
from datetime import datetime, timezone
from typing import Optional

SECONDS_PER_DAY = 86400

# Ratings reach full confidence at ~1000 reactions.
RATING_CONFIDENCE_REACTIONS = 1000


def to_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def days_since(dt: datetime, now: Optional[datetime] = None) -> int:
    """Whole days elapsed since dt (floored, never negative)."""
    now = to_utc(now) if now is not None else datetime.now(timezone.utc)
    elapsed = (now - to_utc(dt)).total_seconds()
    return max(0, math.floor(elapsed / SECONDS_PER_DAY))


def exponential_decay(days_old: float, decay_days: float) -> float:
    """exp(-days_old / decay_days); 1.0 for brand new, approaches 0 with age."""
    return math.exp(-days_old / decay_days)


def log_popularity(count: float) -> float:
    """ln(1 + count), dampens large play counts."""
    return math.log(1 + count)


def community_rating(likes: int, dislikes: int) -> float:
    """
    Like/dislike ratio in [-1, 1] scaled by a volume confidence in [0, 1].

    ratio = (likes - dislikes) / (likes + dislikes)
    confidence = min(1, ln(1 + reactions) / ln(1000))
    Returns 0 when there are no reactions.
    """
    total = likes + dislikes
    if total == 0:
        return 0.0
    ratio = (likes - dislikes) / total
    confidence = min(1.0, math.log(1 + total) / math.log(RATING_CONFIDENCE_REACTIONS))
    return ratio * confidence


def growth_rate(current: float, previous: float) -> float:
    """Relative growth (current - previous) / previous; raw current when previous is 0."""
    if previous == 0:
        return float(current)
    return (current - previous) / previous
