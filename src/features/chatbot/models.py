"""Chatbot configuration request and response models."""

from pydantic import BaseModel

from src.features.backend.models import Chatbot, WidgetConfig, WidgetPosition
from src.features.dashboard.views import ViewState


class SystemPromptUpdate(BaseModel):
    """Request to replace the system prompt."""

    system_prompt: str


class ChatbotViewState(ViewState):
    """Chatbot configuration state."""

    chatbot: Chatbot | None = None
    widget_config: WidgetConfig | None = None
    system_prompt: str | None = None


class EmbedCodeResponse(BaseModel):
    """Widget embed snippet."""

    chatbot_id: str
    position: WidgetPosition
    embed_code: str
