"""
Chart metrics source abstraction.

Supplies the age/platform-scoped candidate set and aggregated metrics per
game. Both calls may fail transiently (raise SourceUnavailableError or any
other exception); the chart ranker never retries, failures reach the caller.
"""

from typing import List, Protocol

from ..models.game import AgeBand, Game, Platform
from ..models.metrics import GameMetrics


class ChartMetricsSource(Protocol):
    """Protocol for aggregated chart metrics. Implement for the metrics store."""

    async def items_for(self, age_band: AgeBand, platform: Platform) -> List[Game]:
        """Games charted for this age band and platform."""
        ...

    async def metrics_for(
        self,
        game_id: str,
        age_band: AgeBand,
        platform: Platform,
    ) -> GameMetrics:
        """Aggregated metrics for one game within the age band and platform."""
        ...
