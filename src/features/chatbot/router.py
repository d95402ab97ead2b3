"""Chatbot configuration endpoints."""

from fastapi import APIRouter, Depends, Query

from src.features.backend.models import WidgetConfig, WidgetPosition
from src.features.dashboard.context import ConsoleContext, get_console_context
from src.features.dashboard.views import SESSION_ERRORS, view_response

from .models import ChatbotViewState, EmbedCodeResponse, SystemPromptUpdate
from .view import ChatbotConfigView

router = APIRouter(prefix="/dashboard/chatbot", tags=["chatbot"])


@router.get("", response_model=ChatbotViewState)
async def get_chatbot(context: ConsoleContext = Depends(get_console_context)):
    """Mount the chatbot configuration view."""
    view = await context.mount(ChatbotConfigView)
    return view_response(view)


@router.put("/system-prompt", response_model=ChatbotViewState)
async def update_system_prompt(
    data: SystemPromptUpdate,
    context: ConsoleContext = Depends(get_console_context),
):
    """Save the system prompt."""
    view = await context.current(ChatbotConfigView)
    await view.save_system_prompt(data.system_prompt)
    return view_response(view)


@router.put("/widget-config", response_model=ChatbotViewState)
async def update_widget_config(
    data: WidgetConfig,
    context: ConsoleContext = Depends(get_console_context),
):
    """Replace the whole widget configuration."""
    view = await context.current(ChatbotConfigView)
    await view.save_widget_config(data)
    return view_response(view)


@router.get("/embed-code", response_model=EmbedCodeResponse)
async def get_embed_code(
    position: WidgetPosition | None = Query(default=None),
    context: ConsoleContext = Depends(get_console_context),
):
    """Get the snippet that embeds the widget on the customer's site."""
    view = await context.current(ChatbotConfigView)
    if view.error_kind in SESSION_ERRORS:
        return view_response(view)

    if position is None:
        config = view.widget_config.data if view.widget_config else None
        position = config.position if config else WidgetPosition.RIGHT

    return EmbedCodeResponse(
        chatbot_id=view.chatbot_id,
        position=position,
        embed_code=view.embed_code(position),
    )
