"""Stats dashboard response models."""

from pydantic import BaseModel

from src.features.backend.models import StatsSnapshot
from src.features.dashboard.views import ViewState


class UsageChart(BaseModel):
    """Daily usage series ready for a bar chart."""

    label: str = "Daily Conversations"
    labels: list[str]
    data: list[int]


class StatsViewState(ViewState):
    """Stats dashboard state."""

    email: str | None = None
    stats: StatsSnapshot | None = None
    chart: UsageChart | None = None
