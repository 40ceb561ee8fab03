"""
Computed parameters for the ranking config.

Derived, read-only values calculated from a RankingConfig. Useful for
operators tuning weights: they show what a setting means in days, spend,
or relative share instead of raw multipliers.
"""

import math
from typing import Any, Dict

from .models.config import RankingConfig

POSITIVE_SIGNALS = (
    "genre_affinity",
    "age_band_popularity",
    "engagement_similarity",
    "favourite_affinity",
    "community_rating",
    "recency_boost",
    "sponsored_boost",
)
PENALTY_SIGNALS = ("repetition_penalty", "creation_recency_penalty")


def compute_parameters(config: RankingConfig) -> Dict[str, Any]:
    """
    Compute derived parameters from a config.

    Args:
        config: the config to describe

    Returns:
        Dictionary of computed parameter values
    """
    computed: Dict[str, Any] = {}
    weights = config.weights.model_dump()

    # =========================================================================
    # Recency half-life (exp(-d / decay) == 0.5)
    # =========================================================================
    computed["recency_half_life_days"] = math.log(2) * config.recency_decay_days

    # =========================================================================
    # Sponsorship: spend at which the boost saturates
    # =========================================================================
    if config.sponsored_amount_multiplier > 0:
        computed["sponsored_amount_at_cap"] = (
            config.max_sponsored_boost / config.sponsored_amount_multiplier
        )
    else:
        computed["sponsored_amount_at_cap"] = float("inf")
    computed["max_sponsored_contribution"] = (
        weights["sponsored_boost"] * config.max_sponsored_boost
    )

    # =========================================================================
    # Creation recency penalty window
    # =========================================================================
    computed["creation_penalty_decay_days"] = (
        config.creation_penalty_max_days - config.creation_grace_period_days
    )
    computed["creation_penalty_per_day"] = 1.0 / computed["creation_penalty_decay_days"]

    # =========================================================================
    # Normalized positive weight shares (relative proportions)
    # =========================================================================
    positive_total = sum(abs(weights[name]) for name in POSITIVE_SIGNALS)
    for name in POSITIVE_SIGNALS:
        share = abs(weights[name]) / positive_total if positive_total > 0 else 0.0
        computed[f"share_{name}"] = share

    # =========================================================================
    # Worst case penalty (both penalties at 1.0)
    # =========================================================================
    computed["max_total_penalty"] = sum(weights[name] for name in PENALTY_SIGNALS)

    # =========================================================================
    # Diversity
    # =========================================================================
    rules = config.diversity_rules
    computed["min_genres_to_fill_list"] = math.ceil(config.max_results / rules.max_per_genre)
    computed["max_list_length_with_sponsored"] = config.max_results + config.max_sponsored_per_list

    return computed
