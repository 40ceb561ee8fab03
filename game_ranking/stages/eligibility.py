"""
Eligibility & safety filtering.

Enforces hard safety rules. Games failing this stage are never scored, and no
later stage may re-admit them (sponsored games included). Rejection is silent
exclusion, never an error or a warning.

Rules (all must pass):
- age gate: game.min_age_band <= user.age_band (by ordinal)
- moderation gate: game.moderation_score >= moderation_threshold
- feature gate: users below AGE_13_PLUS never see VOICE_CHAT games
"""

import logging
from typing import List

from ..models.config import RankingConfig
from ..models.game import AgeBand, Game, GameFeature
from ..models.user import UserContext

logger = logging.getLogger(__name__)

# Features that require the user to be at least the mapped age band.
AGE_RESTRICTED_FEATURES = {
    GameFeature.VOICE_CHAT: AgeBand.AGE_13_PLUS,
}


def _passes_age_gate(game: Game, user_age_band: AgeBand) -> bool:
    """True if the game's minimum age band is at or below the user's."""
    return game.min_age_band.ordinal <= user_age_band.ordinal


def _passes_moderation(game: Game, threshold: float) -> bool:
    return game.moderation_score >= threshold


def _passes_feature_restrictions(game: Game, user_age_band: AgeBand) -> bool:
    """True unless the game declares a feature the user's age band may not access."""
    for feature, min_band in AGE_RESTRICTED_FEATURES.items():
        if game.has_feature(feature) and user_age_band.ordinal < min_band.ordinal:
            return False
    return True


def _rejection_reason(game: Game, user: UserContext, threshold: float):
    if not _passes_age_gate(game, user.age_band):
        return "age_band"
    if not _passes_moderation(game, threshold):
        return "moderation"
    if not _passes_feature_restrictions(game, user.age_band):
        return "feature"
    return None


class EligibilityFilter:
    """Pure, deterministic safety gate over (game, user context)."""

    def __init__(self, moderation_threshold: float):
        self.moderation_threshold = moderation_threshold

    @classmethod
    def from_config(cls, config: RankingConfig) -> "EligibilityFilter":
        return cls(moderation_threshold=config.moderation_threshold)

    def is_eligible(self, game: Game, user: UserContext) -> bool:
        """Validate a single game for eligibility."""
        return _rejection_reason(game, user, self.moderation_threshold) is None

    def filter_eligible(self, games: List[Game], user: UserContext) -> List[Game]:
        """Return games that pass every safety rule, in input order."""
        eligible = []
        for game in games:
            reason = _rejection_reason(game, user, self.moderation_threshold)
            if reason is not None:
                logger.debug(
                    "[eligibility] REJECTED game_id=%s rule=%s age_band=%s",
                    game.game_id, reason, user.age_band.value,
                )
                continue
            eligible.append(game)
        return eligible
