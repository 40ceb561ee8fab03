"""
User models — privacy-safe user context and aggregated play history.

No timestamps and no identity-linked events: only the age band, platform,
genre preferences, and pre-aggregated lists of game ids.
"""

from typing import FrozenSet, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .game import AgeBand, GenreVector, Platform, _check_genre_vector


class UserContext(BaseModel):
    """Minimal request context for one user; user_id is opaque."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    age_band: AgeBand
    platform: Platform = Platform.PC
    genre_vector: GenreVector = Field(default_factory=dict)

    @field_validator("genre_vector")
    @classmethod
    def _non_negative_genres(cls, v: GenreVector) -> GenreVector:
        return _check_genre_vector(v)


class UserHistory(BaseModel):
    """
    Aggregated history signals.

    long_play_games / liked_games / favourited_games: ordered lists of game ids.
    heavily_played: ids the user has already played a lot (repetition penalty).
    """

    model_config = ConfigDict(frozen=True)

    long_play_games: List[str] = Field(default_factory=list)
    liked_games: List[str] = Field(default_factory=list)
    favourited_games: List[str] = Field(default_factory=list)
    heavily_played: FrozenSet[str] = frozenset()
