"""Data sources backing the console views."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable

import httpx

from src.config import Settings

from .models import (
    ChatAnswer,
    Chatbot,
    KnowledgeSource,
    SearchResult,
    StatsSnapshot,
    WidgetConfig,
)

if TYPE_CHECKING:
    from src.features.auth.session import Identity


class DataSource(ABC):
    """
    Resource operations for a single chatbot.

    Instances are bound to one chatbot ID so views cannot reach another
    tenant's resources. Every failure is raised as ``APIError``.
    """

    def __init__(self, chatbot_id: str):
        self.chatbot_id = chatbot_id

    @abstractmethod
    async def get_chatbot(self) -> Chatbot: ...

    @abstractmethod
    async def get_widget_config(self) -> WidgetConfig: ...

    @abstractmethod
    async def update_widget_config(self, config: WidgetConfig) -> WidgetConfig: ...

    @abstractmethod
    async def get_system_prompt(self) -> str: ...

    @abstractmethod
    async def update_system_prompt(self, prompt: str) -> str: ...

    @abstractmethod
    async def list_sources(self) -> list[KnowledgeSource]: ...

    @abstractmethod
    async def get_source(self, source_id: str) -> KnowledgeSource: ...

    @abstractmethod
    async def create_document_source(self, name: str, content: str) -> KnowledgeSource: ...

    @abstractmethod
    async def create_website_source(
        self, url: str, max_pages: int = 10, max_depth: int = 2
    ) -> KnowledgeSource: ...

    @abstractmethod
    async def delete_source(self, source_id: str) -> None: ...

    @abstractmethod
    async def search(self, query: str, top_k: int = 5) -> list[SearchResult]: ...

    @abstractmethod
    async def test_chat(self, query: str) -> ChatAnswer: ...

    @abstractmethod
    async def get_stats(self) -> StatsSnapshot: ...


DataSourceFactory = Callable[["Identity", str], DataSource]


def build_data_source_factory(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> DataSourceFactory:
    """
    Choose live or demo data for the whole application.

    Demo mode serves seeded placeholder data from memory; otherwise every
    view talks to the backend with the identity's credential.
    """
    from src.core.api_client import BackendClient

    from .demo import DemoBackend, DemoStore
    from .live import LiveBackend

    if settings.demo_mode:
        store = DemoStore(max_chatbots=settings.max_demo_chatbots)

        def demo_factory(identity: "Identity", chatbot_id: str) -> DataSource:
            return DemoBackend(store, chatbot_id)

        return demo_factory

    def live_factory(identity: "Identity", chatbot_id: str) -> DataSource:
        client = BackendClient.for_identity(identity, settings, transport=transport)
        return LiveBackend(client, chatbot_id)

    return live_factory
