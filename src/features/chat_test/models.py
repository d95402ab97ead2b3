"""Test console request and response models."""

from pydantic import BaseModel, Field

from src.features.backend.models import ChatMessage
from src.features.dashboard.views import ViewState


class ConsoleMessageRequest(BaseModel):
    """A message typed into the test console."""

    message: str = ""


class ChatTestViewState(ViewState):
    """Test console state."""

    chatbot_name: str | None = None
    messages: list[ChatMessage] = Field(default_factory=list)
    typing: bool = False
