"""Test console view."""

from typing import Any

from src.core.resource import Resource
from src.features.backend.datasource import DataSource
from src.features.backend.models import (
    DEFAULT_GREETING,
    ChatAnswer,
    Chatbot,
    ChatMessage,
    MessageRole,
)
from src.features.dashboard.views import ConsoleView, ErrorKind

from .models import ChatTestViewState

APOLOGY = (
    "Sorry, I encountered an error while processing your request. "
    "Please try again later."
)


class ChatTestView(ConsoleView):
    """
    Chat with the configured chatbot before deploying it.

    The conversation exists only in this view and is lost on unmount.
    """

    name = "chat_test"
    state_class = ChatTestViewState

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.chatbot: Resource[Chatbot] | None = None
        self.messages: list[ChatMessage] = []

    def create_resources(self, source: DataSource) -> None:
        self.chatbot = self.resource(source.get_chatbot)

    def resources(self) -> list[Resource]:
        return [self.chatbot] if self.chatbot else []

    @property
    def greeting(self) -> str:
        chatbot = self.chatbot.data if self.chatbot else None
        if chatbot and chatbot.widget_config and chatbot.widget_config.greeting:
            return chatbot.widget_config.greeting
        return DEFAULT_GREETING

    async def load(self) -> None:
        await super().load()
        # Without the chatbot the console still opens on the default greeting
        if self.mounted and self.source is not None and not self.messages:
            self.reset()

    def on_loaded(self) -> None:
        if all(m.role == MessageRole.ASSISTANT for m in self.messages):
            self.reset()

    def reset(self) -> None:
        self.messages = [ChatMessage(role=MessageRole.ASSISTANT, content=self.greeting)]

    async def send_message(self, text: str) -> bool:
        if not self.can_mutate:
            return False
        if not text.strip():
            return self.reject("Please enter a message")

        if self.error_kind == ErrorKind.FETCH:
            await self.refetch()
            if not self.mounted:
                return False
            if self.error_kind == ErrorKind.FETCH:
                return self.reject(self.error or "Could not load the chatbot")

        query = text.strip()
        self.messages.append(ChatMessage(role=MessageRole.USER, content=query))

        def append_answer(answer: ChatAnswer) -> None:
            self.messages.append(
                ChatMessage(
                    role=MessageRole.ASSISTANT,
                    content=answer.answer,
                    sources=answer.sources,
                )
            )

        answered = await self.mutate(
            "typing",
            lambda source: source.test_chat(query),
            append_answer,
        )
        if not answered and self.mounted:
            self.messages.append(ChatMessage(role=MessageRole.ASSISTANT, content=APOLOGY))
        return answered

    def view_state(self) -> dict[str, Any]:
        chatbot = self.chatbot.data if self.chatbot else None
        return {
            "chatbot_name": chatbot.name if chatbot else None,
            "messages": self.messages,
            "typing": "typing" in self.busy,
        }
