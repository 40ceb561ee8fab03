"""
Candidate generation — merges several candidate sources into one pool.

Sources are queried in a fixed order (genre-aligned, age-band popular,
trending, editorial picks, sponsored); duplicates are dropped by game_id,
first seen wins. The pool is NOT safety-filtered: eligibility runs next.

The public entry point is CandidateGenerator.generate_candidates.
"""

import logging
from typing import Dict, List, Protocol

from pydantic import BaseModel, ConfigDict, Field

from ..models.game import AgeBand, Game, GenreVector, ensure_games
from ..models.user import UserContext

logger = logging.getLogger(__name__)


class CandidateSource(Protocol):
    """
    Protocol for precomputed candidate tables. Failures propagate to the caller.

    Methods may return Game models or raw catalog dicts; dicts are validated
    into Games when pooled.
    """

    async def top_by_genres(self, genre_vector: GenreVector, limit: int) -> List[Game]:
        ...

    async def popular_by_age_band(self, age_band: AgeBand, limit: int) -> List[Game]:
        ...

    async def trending(self, limit: int) -> List[Game]:
        ...

    async def editorial_picks(self, limit: int) -> List[Game]:
        ...

    async def sponsored(self, limit: int) -> List[Game]:
        ...


class CandidateLimits(BaseModel):
    """How many games to request from each source."""

    model_config = ConfigDict(frozen=True)

    genre: int = Field(default=50, ge=0)
    popular: int = Field(default=50, ge=0)
    trending: int = Field(default=30, ge=0)
    editorial: int = Field(default=20, ge=0)
    sponsored: int = Field(default=15, ge=0)


def _add_to_pool(pool: Dict[str, Game], games: List[Game]) -> int:
    """Add games not already pooled; returns how many were new."""
    added = 0
    for game in ensure_games(games):
        if game.game_id not in pool:
            pool[game.game_id] = game
            added += 1
    return added


class CandidateGenerator:
    def __init__(
        self,
        source: CandidateSource,
        sponsored_enabled: bool = True,
        limits: CandidateLimits = CandidateLimits(),
    ):
        self.source = source
        self.sponsored_enabled = sponsored_enabled
        self.limits = limits

    async def generate_candidates(self, user: UserContext) -> List[Game]:
        """Large, deduplicated candidate pool for one user, in first-seen order."""
        pool: Dict[str, Game] = {}
        stats = {}

        stats["genre"] = _add_to_pool(
            pool, await self.source.top_by_genres(user.genre_vector, self.limits.genre)
        )
        stats["popular"] = _add_to_pool(
            pool, await self.source.popular_by_age_band(user.age_band, self.limits.popular)
        )
        stats["trending"] = _add_to_pool(
            pool, await self.source.trending(self.limits.trending)
        )
        stats["editorial"] = _add_to_pool(
            pool, await self.source.editorial_picks(self.limits.editorial)
        )
        if self.sponsored_enabled:
            stats["sponsored"] = _add_to_pool(
                pool, await self.source.sponsored(self.limits.sponsored)
            )

        logger.debug("[candidates] POOL size=%s new_by_source=%s", len(pool), stats)
        return list(pool.values())

    async def popular_by_age_band(self, age_band: AgeBand, limit: int) -> List[Game]:
        return ensure_games(await self.source.popular_by_age_band(age_band, limit))
