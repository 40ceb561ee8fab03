"""
Game model — typed representation of a catalog game for the ranking pipeline.

Used by eligibility, scoring, diversity, and chart stages instead of raw dicts.
Built from catalog/API dicts via Game.model_validate(d).
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

GenreVector = Dict[int, float]


class AgeBand(str, Enum):
    """
    Coarse age classification for users and games.

    Totally ordered: UNDER_9 < AGE_9_TO_12 < AGE_13_PLUS. Comparisons always go
    through the ordinal, never through the string value.
    """

    UNDER_9 = "UNDER_9"
    AGE_9_TO_12 = "AGE_9_TO_12"
    AGE_13_PLUS = "AGE_13_PLUS"

    @property
    def ordinal(self) -> int:
        return _AGE_BAND_ORDER[self]

    @classmethod
    def _coerce(cls, other):
        # Plain strings are parsed so they never fall back to string ordering.
        if isinstance(other, AgeBand):
            return other
        if isinstance(other, str):
            return cls(other)
        return None

    def __lt__(self, other):
        other = AgeBand._coerce(other)
        if other is None:
            return NotImplemented
        return self.ordinal < other.ordinal

    def __le__(self, other):
        other = AgeBand._coerce(other)
        if other is None:
            return NotImplemented
        return self.ordinal <= other.ordinal

    def __gt__(self, other):
        other = AgeBand._coerce(other)
        if other is None:
            return NotImplemented
        return self.ordinal > other.ordinal

    def __ge__(self, other):
        other = AgeBand._coerce(other)
        if other is None:
            return NotImplemented
        return self.ordinal >= other.ordinal


_AGE_BAND_ORDER = {
    AgeBand.UNDER_9: 0,
    AgeBand.AGE_9_TO_12: 1,
    AgeBand.AGE_13_PLUS: 2,
}


class Platform(str, Enum):
    PC = "PC"
    MOBILE = "MOBILE"
    VR = "VR"
    CONSOLE = "CONSOLE"


class GameFeature(str, Enum):
    VOICE_CHAT = "VOICE_CHAT"
    TEXT_CHAT = "TEXT_CHAT"
    MULTIPLAYER = "MULTIPLAYER"
    SINGLE_PLAYER = "SINGLE_PLAYER"
    LOW_INTENSITY = "LOW_INTENSITY"


def _check_genre_vector(vector: GenreVector) -> GenreVector:
    for genre_id, weight in vector.items():
        if weight < 0:
            raise ValueError(f"Genre weight must be non-negative, got {weight} for genre {genre_id}")
    return vector


def _check_play_counts(counts: Dict["AgeBand", int]) -> Dict["AgeBand", int]:
    for age_band, plays in counts.items():
        if plays < 0:
            raise ValueError(f"Play count must be non-negative, got {plays} for {age_band.value}")
    return counts


class Game(BaseModel):
    """
    Game payload used across the ranking stages.

    Engagement counters default to 0 so partial catalog records still validate.
    creation_date falls back to release_date when the catalog does not track it.
    """

    model_config = ConfigDict(frozen=True)

    game_id: str
    min_age_band: AgeBand = AgeBand.UNDER_9
    moderation_score: float = Field(ge=0.0, le=1.0)
    release_date: datetime
    creation_date: datetime
    is_sponsored: bool = False
    sponsored_amount: float = Field(default=0.0, ge=0.0)
    genre_vector: GenreVector = Field(default_factory=dict)
    features: FrozenSet[GameFeature] = frozenset()
    plays_by_age_band: Dict[AgeBand, int] = Field(default_factory=dict)

    total_sessions: int = Field(default=0, ge=0)
    unique_players: int = Field(default=0, ge=0)
    current_sessions: int = Field(default=0, ge=0)
    total_revenue: float = Field(default=0.0, ge=0.0)
    likes: int = Field(default=0, ge=0)
    dislikes: int = Field(default=0, ge=0)
    total_plays: int = Field(default=0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _default_creation_date(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("creation_date") is None:
            data = {**data, "creation_date": data.get("release_date")}
        return data

    @field_validator("genre_vector")
    @classmethod
    def _non_negative_genres(cls, v: GenreVector) -> GenreVector:
        return _check_genre_vector(v)

    @field_validator("plays_by_age_band")
    @classmethod
    def _non_negative_plays(cls, v: Dict[AgeBand, int]) -> Dict[AgeBand, int]:
        return _check_play_counts(v)

    def has_feature(self, feature: GameFeature) -> bool:
        return feature in self.features

    def plays_for(self, age_band: AgeBand) -> int:
        """Play count for one age band; 0 when the band has no data."""
        return self.plays_by_age_band.get(age_band, 0)

    @property
    def genres(self) -> List[int]:
        """Genre ids this game declares (keys of its genre vector)."""
        return list(self.genre_vector.keys())


def ensure_games(games: List[Union[Dict[str, Any], "Game"]]) -> List["Game"]:
    """Convert list of dicts or Games to list of Game models for use in the pipeline."""
    return [
        Game.model_validate(g) if isinstance(g, dict) else g
        for g in games
    ]


def ensure_game_by_id(
    game_by_id: Optional[Mapping[str, Union[Dict[str, Any], "Game"]]],
) -> Dict[str, "Game"]:
    """Convert game_by_id values to Game models."""
    if not game_by_id:
        return {}
    return {
        k: Game.model_validate(v) if isinstance(v, dict) else v
        for k, v in game_by_id.items()
    }
