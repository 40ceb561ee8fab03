"""
Diversity & fairness pass — greedy re-selection over the score-sorted list.

Walks candidates in score order and admits each unless:
- any of its genres already has max_per_genre admitted games, or
- avoid_all_multiplayer is on, every admitted game so far is MULTIPLAYER,
  and this one is too.

Stops at max_results. Afterwards the min_genres and low-intensity rules are
checked and reported as DiversityDiagnostics; a shortfall never changes the
output.
"""

import logging
from typing import Dict, List, Tuple

from ..models.config import RankingConfig
from ..models.game import GameFeature
from ..models.output import DiversityDiagnostics
from ..models.scoring import ScoredGame

logger = logging.getLogger(__name__)


def _violates_max_per_genre(
    scored: ScoredGame,
    genre_counts: Dict[int, int],
    max_per_genre: int,
) -> bool:
    return any(genre_counts.get(g, 0) >= max_per_genre for g in scored.game.genres)


def _violates_all_multiplayer(
    scored: ScoredGame,
    selected: List[ScoredGame],
    all_multiplayer_so_far: bool,
) -> bool:
    """True if admitting this game would keep a non-empty list all-multiplayer."""
    if not selected:
        return False
    return all_multiplayer_so_far and scored.game.has_feature(GameFeature.MULTIPLAYER)


def genre_stats(games: List[ScoredGame]) -> Dict[int, int]:
    """Number of games declaring each genre."""
    stats: Dict[int, int] = {}
    for scored in games:
        for genre_id in scored.game.genres:
            stats[genre_id] = stats.get(genre_id, 0) + 1
    return stats


class DiversityPass:
    """Applies the configured diversity rules to a score-sorted list."""

    def __init__(self, config: RankingConfig):
        self.config = config

    def diversify(self, sorted_games: List[ScoredGame]) -> List[ScoredGame]:
        """Diversified list of at most max_results games; diagnostics are discarded."""
        selected, _ = self.diversify_with_diagnostics(sorted_games)
        return selected

    def diversify_with_diagnostics(
        self,
        sorted_games: List[ScoredGame],
    ) -> Tuple[List[ScoredGame], DiversityDiagnostics]:
        """
        Greedy single pass over sorted_games (not mutated).

        Returns:
            selected: admitted games in input order, at most max_results
            diagnostics: min_genres / low-intensity check results
        """
        rules = self.config.diversity_rules
        selected: List[ScoredGame] = []
        genre_counts: Dict[int, int] = {}
        all_multiplayer = True

        for scored in sorted_games:
            if _violates_max_per_genre(scored, genre_counts, rules.max_per_genre):
                continue
            if rules.avoid_all_multiplayer and _violates_all_multiplayer(
                scored, selected, all_multiplayer
            ):
                continue

            selected.append(scored)
            for genre_id in scored.game.genres:
                genre_counts[genre_id] = genre_counts.get(genre_id, 0) + 1
            if not scored.game.has_feature(GameFeature.MULTIPLAYER):
                all_multiplayer = False

            if len(selected) >= self.config.max_results:
                break

        diagnostics = self._check_minimum_requirements(selected, genre_counts)
        return selected, diagnostics

    def _check_minimum_requirements(
        self,
        selected: List[ScoredGame],
        genre_counts: Dict[int, int],
    ) -> DiversityDiagnostics:
        rules = self.config.diversity_rules
        diagnostics = DiversityDiagnostics(
            unique_genres=len(genre_counts),
            min_genres=rules.min_genres,
            low_intensity_required=rules.require_low_intensity,
            has_low_intensity=any(
                s.game.has_feature(GameFeature.LOW_INTENSITY) for s in selected
            ),
        )
        if diagnostics.genre_shortfall:
            logger.info(
                "[diversity] GENRE_SHORTFALL unique_genres=%s min_genres=%s",
                diagnostics.unique_genres, diagnostics.min_genres,
            )
        if diagnostics.low_intensity_shortfall:
            logger.info("[diversity] LOW_INTENSITY_MISSING selected=%s", len(selected))
        return diagnostics
