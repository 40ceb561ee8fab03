"""Algorithmic charts over aggregated metrics, per age band and platform."""

from .formulas import CHART_FORMULAS, UP_AND_COMING_WINDOW_DAYS
from .ranker import ChartRanker, parse_chart_type
from .sources import ChartMetricsSource

__all__ = [
    "CHART_FORMULAS",
    "UP_AND_COMING_WINDOW_DAYS",
    "ChartMetricsSource",
    "ChartRanker",
    "parse_chart_type",
]
