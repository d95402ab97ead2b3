"""Stats dashboard view."""

from typing import Any

from src.core.resource import Resource
from src.features.backend.datasource import DataSource
from src.features.backend.models import StatsSnapshot
from src.features.dashboard.views import ConsoleView

from .models import StatsViewState, UsageChart


class StatsView(ConsoleView):
    """Usage counters, daily series and top questions for the chatbot."""

    name = "overview"
    state_class = StatsViewState

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.stats: Resource[StatsSnapshot] | None = None

    def create_resources(self, source: DataSource) -> None:
        self.stats = self.resource(source.get_stats)

    def resources(self) -> list[Resource]:
        return [self.stats] if self.stats else []

    def view_state(self) -> dict[str, Any]:
        snapshot = self.stats.data if self.stats else None
        chart = None
        if snapshot is not None:
            chart = UsageChart(
                labels=[day.date for day in snapshot.daily_usage],
                data=[day.count for day in snapshot.daily_usage],
            )
        return {
            "email": self.identity.email if self.identity else None,
            "stats": snapshot,
            "chart": chart,
        }
