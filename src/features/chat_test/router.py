"""Test console endpoints."""

from fastapi import APIRouter, Depends, Request

from src.core.rate_limiter import limiter
from src.features.dashboard.context import ConsoleContext, get_console_context
from src.features.dashboard.views import view_response

from .models import ChatTestViewState, ConsoleMessageRequest
from .view import ChatTestView

router = APIRouter(prefix="/dashboard/chatbot/test", tags=["test-console"])


@router.get("", response_model=ChatTestViewState)
async def open_console(context: ConsoleContext = Depends(get_console_context)):
    """Mount the test console with a fresh conversation."""
    view = await context.mount(ChatTestView)
    return view_response(view)


@router.post("/messages", response_model=ChatTestViewState)
@limiter.limit("20/minute")
async def send_message(
    request: Request,
    body: ConsoleMessageRequest,
    context: ConsoleContext = Depends(get_console_context),
):
    """Send a test message and append the chatbot's answer."""
    view = await context.current(ChatTestView)
    await view.send_message(body.message)
    return view_response(view)


@router.delete("/messages", response_model=ChatTestViewState)
async def reset_conversation(context: ConsoleContext = Depends(get_console_context)):
    """Start the conversation over from the greeting."""
    view = await context.current(ChatTestView)
    if view.can_mutate:
        view.reset()
    return view_response(view)
