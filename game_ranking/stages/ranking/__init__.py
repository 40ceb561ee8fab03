"""
Scoring stage: composite per-signal scoring into a sorted, explainable list.

Public API: ScoringEngine, get_badges.
- core: ScoringEngine and the deterministic ranking key.
- Submodules: signals, similarity (history similarity via game lookup), badges.
"""

from .badges import get_badges
from .core import ScoringEngine, build_scored_game, ranking_key

__all__ = [
    "ScoringEngine",
    "build_scored_game",
    "get_badges",
    "ranking_key",
]
