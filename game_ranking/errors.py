"""
Errors raised by the ranking engine.

Safety rejections are not errors (ineligible games are silently excluded) and
diversity shortfalls are diagnostics; only caller mistakes and source failures
raise.
"""


class GameRankingError(Exception):
    """Base class for ranking engine errors."""


class InvalidChartRequest(GameRankingError, ValueError):
    """Unknown chart type, or a genre-scoped chart requested without a genre id."""


class SourceUnavailableError(GameRankingError):
    """
    A candidate or metrics source call failed transiently (timeout, unavailable).

    Never retried inside the engine; the caller owns retry and backoff.
    """
