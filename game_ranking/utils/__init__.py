"""Shared utilities for scoring, similarity, and time math."""

from .scores import (
    community_rating,
    days_since,
    exponential_decay,
    growth_rate,
    log_popularity,
    to_utc,
)
from .similarity import cosine_similarity

__all__ = [
    "community_rating",
    "cosine_similarity",
    "days_since",
    "exponential_decay",
    "growth_rate",
    "log_popularity",
    "to_utc",
]
