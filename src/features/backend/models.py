"""Chatbot backend resource models."""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field


class BubbleSize(str, Enum):
    """Widget chat bubble sizes."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class WidgetPosition(str, Enum):
    """Corner of the page the widget is anchored to."""

    LEFT = "left"
    RIGHT = "right"


class WidgetTheme(str, Enum):
    """Widget colour theme."""

    LIGHT = "light"
    DARK = "dark"


class SourceType(str, Enum):
    """Kind of knowledge source."""

    DOCUMENT = "Document"
    WEBSITE = "Website"


class ProcessingStatus(str, Enum):
    """Backend processing state of a knowledge source."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class MessageRole(str, Enum):
    """Author of a test console message."""

    USER = "user"
    ASSISTANT = "assistant"


DEFAULT_GREETING = "Hello! How can I help you today?"


class WidgetConfig(BaseModel):
    """Widget appearance and model parameters. Always replaced as a whole."""

    logo_url: str = ""
    name: str = ""
    primary_color: str = Field(
        default="#6366F1", pattern=r"^#(?:[0-9a-fA-F]{3}){1,2}$"
    )
    bubble_size: BubbleSize = BubbleSize.MEDIUM
    position: WidgetPosition = WidgetPosition.RIGHT
    greeting: str = DEFAULT_GREETING
    theme: WidgetTheme = WidgetTheme.LIGHT
    model: str = "gpt-4o"
    temperature: float = Field(default=0.7, ge=0.0, le=1.0)
    top_k: int = Field(default=3, ge=1, le=20)
    use_query_expansion: bool = False


class Chatbot(BaseModel):
    """A customer's chatbot."""

    id: str | int
    name: str
    status: str = "active"
    system_prompt: str | None = None
    widget_config: WidgetConfig | None = None


class KnowledgeSource(BaseModel):
    """A document or crawled website ingested for retrieval."""

    id: str | int
    chatbot_id: str | int
    type: SourceType
    name: str
    content: str | None = None
    processing_status: ProcessingStatus = ProcessingStatus.PENDING
    processing_start_time: str | None = None
    processing_end_time: str | None = None
    processing_message: str | None = None


class ChatSource(BaseModel):
    """Citation attached to an assistant answer."""

    content: str
    source: str
    title: str
    chunk_id: str | int | None = None


class ChatMessage(BaseModel):
    """A message in the test console conversation."""

    role: MessageRole
    content: str
    sources: list[ChatSource] | None = None


class ChatAnswer(BaseModel):
    """Backend answer to a test chat query."""

    answer: str
    sources: list[ChatSource] = Field(default_factory=list)


class SearchResult(BaseModel):
    """Knowledge base search hit."""

    chunk_id: str | int
    content: str
    similarity: float
    metadata: dict[str, Any] = Field(default_factory=dict)
    chunking_strategy: str | None = None


class DailyUsage(BaseModel):
    """Conversation count for one day."""

    date: str
    count: int


class TopQuestion(BaseModel):
    """A frequently asked question."""

    question: str
    count: int


class StatsSnapshot(BaseModel):
    """Usage statistics for a chatbot. Accepts camelCase backend keys."""

    total_conversations: int = Field(
        validation_alias=AliasChoices("total_conversations", "totalConversations")
    )
    total_messages: int = Field(
        validation_alias=AliasChoices("total_messages", "totalMessages")
    )
    avg_response_time: float = Field(
        validation_alias=AliasChoices("avg_response_time", "avgResponseTime")
    )
    daily_usage: list[DailyUsage] = Field(
        default_factory=list,
        validation_alias=AliasChoices("daily_usage", "dailyUsage"),
    )
    top_questions: list[TopQuestion] = Field(
        default_factory=list,
        validation_alias=AliasChoices("top_questions", "topQuestions"),
    )
