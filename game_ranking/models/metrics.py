"""
Chart metrics model — aggregated, privacy-safe counters for one game,
scoped to an age band and platform by the metrics source.
"""

from pydantic import BaseModel, ConfigDict, Field


class GameMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    plays_last_7_days: int = Field(default=0, ge=0)
    plays_prev_7_days: int = Field(default=0, ge=0)
    plays_last_30_days: int = Field(default=0, ge=0)
    total_sessions: int = Field(default=0, ge=0)
    # 0 is meaningful: the replay chart skips games without players.
    unique_players: int = Field(default=0, ge=0)
    current_sessions: int = Field(default=0, ge=0)
    total_revenue: float = Field(default=0.0, ge=0.0)
    likes: int = Field(default=0, ge=0)
    dislikes: int = Field(default=0, ge=0)
    favourites: int = Field(default=0, ge=0)
    total_plays: int = Field(default=0, ge=0)
