"""Stats dashboard endpoints."""

from fastapi import APIRouter, Depends

from src.features.dashboard.context import ConsoleContext, get_console_context
from src.features.dashboard.views import view_response

from .models import StatsViewState
from .view import StatsView

router = APIRouter(prefix="/dashboard", tags=["overview"])


@router.get("", response_model=StatsViewState)
async def get_overview(context: ConsoleContext = Depends(get_console_context)):
    """Mount the stats dashboard. Statistics are fetched fresh every time."""
    view = await context.mount(StatsView)
    return view_response(view)
