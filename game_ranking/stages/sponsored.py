"""
Sponsored allocation — interleaves a bounded number of sponsored games into
the diversified list at evenly spaced slots.

Runs after the diversity pass. Every sponsored candidate must already have
passed eligibility filtering; this stage never admits anything on its own.
"""

import logging
from typing import List, Set

from ..models.scoring import ScoredGame

logger = logging.getLogger(__name__)


def injection_slots(organic_count: int, sponsored_count: int) -> List[int]:
    """
    Output positions for sponsored games.

    spacing = organic_count // (sponsored_count + 1); slot i = spacing * (i + 1) + i.
    E.g. 9 organic, 2 sponsored -> spacing 3 -> slots [3, 7].
    """
    spacing = organic_count // (sponsored_count + 1)
    return [spacing * (i + 1) + i for i in range(sponsored_count)]


class SponsoredAllocator:
    """Caps and places sponsored games; never reorders them among themselves."""

    def __init__(self, max_sponsored_per_list: int):
        self.max_sponsored_per_list = max_sponsored_per_list

    def _select_sponsored(
        self,
        organic: List[ScoredGame],
        sponsored_candidates: List[ScoredGame],
    ) -> List[ScoredGame]:
        """Candidates not already in the list, deduplicated, capped, in incoming order."""
        seen: Set[str] = {s.game.game_id for s in organic}
        chosen = []
        for scored in sponsored_candidates:
            if len(chosen) >= self.max_sponsored_per_list:
                break
            if scored.game.game_id in seen:
                continue
            seen.add(scored.game.game_id)
            chosen.append(scored)
        return chosen

    def inject_sponsored(
        self,
        diversified: List[ScoredGame],
        sponsored_candidates: List[ScoredGame],
    ) -> List[ScoredGame]:
        """
        Merge sponsored games into the diversified list.

        Walks output positions left to right: a sponsored game goes at each
        slot while any remain, otherwise the next organic game. When one
        source runs out the other fills the remaining positions.
        Returns the input unchanged when no sponsored game qualifies.
        """
        sponsored = self._select_sponsored(diversified, sponsored_candidates)
        if not sponsored:
            return diversified

        slots = set(injection_slots(len(diversified), len(sponsored)))
        result: List[ScoredGame] = []
        sponsored_idx = 0
        organic_idx = 0
        for position in range(len(diversified) + len(sponsored)):
            place_sponsored = (
                sponsored_idx < len(sponsored)
                and (position in slots or organic_idx >= len(diversified))
            )
            if place_sponsored:
                result.append(sponsored[sponsored_idx])
                sponsored_idx += 1
            else:
                result.append(diversified[organic_idx])
                organic_idx += 1

        logger.debug(
            "[sponsored] INJECTED sponsored=%s organic=%s slots=%s",
            len(sponsored), len(diversified), sorted(slots),
        )
        return result
