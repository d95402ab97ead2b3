"""Data source backed by the chatbot backend API."""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from src.core.api_client import APIError, BackendClient

from .datasource import DataSource
from .models import (
    ChatAnswer,
    Chatbot,
    KnowledgeSource,
    SearchResult,
    StatsSnapshot,
    WidgetConfig,
)

M = TypeVar("M", bound=BaseModel)


def _parse(model: type[M], payload: Any) -> M:
    """Validate a backend payload, reporting shape errors as APIError."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise APIError(
            f"Unexpected {model.__name__} response from backend: "
            f"{e.error_count()} invalid field(s)"
        ) from e


class LiveBackend(DataSource):
    """Translates data source calls into backend requests."""

    def __init__(self, client: BackendClient, chatbot_id: str):
        super().__init__(chatbot_id)
        self.client = client

    async def get_chatbot(self) -> Chatbot:
        return _parse(Chatbot, await self.client.get_chatbot(self.chatbot_id))

    async def get_widget_config(self) -> WidgetConfig:
        data = await self.client.get_widget_config(self.chatbot_id)
        return _parse(WidgetConfig, data)

    async def update_widget_config(self, config: WidgetConfig) -> WidgetConfig:
        data = await self.client.update_widget_config(
            self.chatbot_id, config.model_dump(mode="json")
        )
        # Backends that answer with an empty body keep what was sent
        return _parse(WidgetConfig, data) if isinstance(data, dict) else config

    async def get_system_prompt(self) -> str:
        data = await self.client.get_system_prompt(self.chatbot_id)
        if isinstance(data, dict):
            return data.get("system_prompt") or ""
        return data or ""

    async def update_system_prompt(self, prompt: str) -> str:
        data = await self.client.update_system_prompt(self.chatbot_id, prompt)
        if isinstance(data, dict) and "system_prompt" in data:
            return data["system_prompt"] or ""
        return prompt

    async def list_sources(self) -> list[KnowledgeSource]:
        data = await self.client.list_knowledge_sources(self.chatbot_id)
        if not isinstance(data, list):
            raise APIError("Unexpected knowledge source list from backend")
        return [_parse(KnowledgeSource, item) for item in data]

    async def get_source(self, source_id: str) -> KnowledgeSource:
        source = _parse(
            KnowledgeSource, await self.client.get_knowledge_source(source_id)
        )
        if str(source.chatbot_id) != self.chatbot_id:
            raise APIError("Knowledge source not found", status_code=404)
        return source

    async def create_document_source(self, name: str, content: str) -> KnowledgeSource:
        data = await self.client.create_document_source(self.chatbot_id, name, content)
        return _parse(KnowledgeSource, data)

    async def create_website_source(
        self, url: str, max_pages: int = 10, max_depth: int = 2
    ) -> KnowledgeSource:
        data = await self.client.create_website_source(
            self.chatbot_id, url, max_pages=max_pages, max_depth=max_depth
        )
        return _parse(KnowledgeSource, data)

    async def delete_source(self, source_id: str) -> None:
        # Raises the same 404 as get_source for another chatbot's source
        await self.get_source(source_id)
        await self.client.delete_knowledge_source(source_id)

    async def search(self, query: str, top_k: int = 5) -> list[SearchResult]:
        data = await self.client.search_knowledge(self.chatbot_id, query, top_k)
        if isinstance(data, dict):
            data = data.get("results", [])
        return [_parse(SearchResult, item) for item in data or []]

    async def test_chat(self, query: str) -> ChatAnswer:
        return _parse(ChatAnswer, await self.client.run_test_chat(self.chatbot_id, query))

    async def get_stats(self) -> StatsSnapshot:
        return _parse(StatsSnapshot, await self.client.get_stats(self.chatbot_id))
