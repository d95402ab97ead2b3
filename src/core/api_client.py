"""HTTP client for the chatbot backend API."""

import logging
from typing import TYPE_CHECKING, Any

import httpx

from src.config import Settings, get_settings

if TYPE_CHECKING:
    from src.features.auth.session import Identity

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Any failed backend call, reduced to a message."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class BackendClient:
    """
    Authenticated wrapper around the backend REST API.

    Every call carries the caller's credential in the ``X-Client-Key``
    header. There is no retry, caching or token refresh: each method is a
    single request whose failure surfaces as ``APIError``.
    """

    CREDENTIAL_HEADER = "X-Client-Key"

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        fallback_api_key: str = "",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key or fallback_api_key
        self.transport = transport

    @classmethod
    def for_identity(
        cls,
        identity: "Identity",
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "BackendClient":
        """Build a client using the identity's assigned key, else the fallback key."""
        settings = settings or get_settings()
        return cls(
            base_url=settings.backend_api_url,
            api_key=identity.api_key,
            fallback_api_key=settings.backend_api_key,
            transport=transport,
        )

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """
        Send one request and return the decoded JSON response.

        Raises:
            APIError: On transport failure or a non-2xx status. The message is
                the backend's ``detail`` field when the error body has one.
        """
        headers = {
            "Content-Type": "application/json",
            self.CREDENTIAL_HEADER: self.api_key,
        }

        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.request(
                    method,
                    f"{self.base_url}{endpoint}",
                    headers=headers,
                    json=body,
                    params=params,
                )
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, endpoint, e)
            raise APIError(f"API request failed: {e}") from e

        if not response.is_success:
            message = _error_detail(response) or (
                f"API request failed with status {response.status_code}"
            )
            logger.warning(
                "%s %s returned %s: %s",
                method,
                endpoint,
                response.status_code,
                message,
            )
            raise APIError(message, status_code=response.status_code)

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise APIError(
                "API returned an invalid JSON response",
                status_code=response.status_code,
            ) from e

    # Chatbots
    async def get_chatbot(self, chatbot_id: str) -> dict[str, Any]:
        return await self.request(f"/chatbots/{chatbot_id}")

    async def get_widget_config(self, chatbot_id: str) -> dict[str, Any]:
        return await self.request(f"/chatbots/{chatbot_id}/widget-config")

    async def update_widget_config(
        self, chatbot_id: str, config: dict[str, Any]
    ) -> dict[str, Any]:
        return await self.request(
            f"/chatbots/{chatbot_id}/widget-config", "PUT", config
        )

    async def get_system_prompt(self, chatbot_id: str) -> Any:
        return await self.request(f"/chatbots/{chatbot_id}/system-prompt")

    async def update_system_prompt(self, chatbot_id: str, prompt: str) -> Any:
        return await self.request(
            f"/chatbots/{chatbot_id}/system-prompt",
            "PUT",
            {"system_prompt": prompt},
        )

    # Knowledge sources
    async def list_knowledge_sources(self, chatbot_id: str) -> list[dict[str, Any]]:
        return await self.request(
            "/knowledge-sources/", params={"chatbot_id": chatbot_id}
        )

    async def get_knowledge_source(self, source_id: str) -> dict[str, Any]:
        return await self.request(f"/knowledge-sources/{source_id}")

    async def create_document_source(
        self,
        chatbot_id: str,
        name: str,
        content: str,
        chunking_strategy: str = "hierarchical",
    ) -> dict[str, Any]:
        return await self.request(
            "/knowledge-sources/",
            "POST",
            {
                "chatbot_id": chatbot_id,
                "type": "Document",
                "name": name,
                "content": content,
                "chunking_strategy": chunking_strategy,
            },
        )

    async def create_website_source(
        self,
        chatbot_id: str,
        url: str,
        max_pages: int = 10,
        max_depth: int = 2,
    ) -> dict[str, Any]:
        return await self.request(
            "/knowledge-sources/crawl-website",
            "POST",
            {
                "chatbot_id": chatbot_id,
                "url": url,
                "max_pages": max_pages,
                "max_depth": max_depth,
                "chunking_strategy": "hierarchical",
                "scrape_all_pages": False,
            },
        )

    async def delete_knowledge_source(self, source_id: str) -> Any:
        return await self.request(f"/knowledge-sources/{source_id}", "DELETE")

    # RAG
    async def search_knowledge(
        self, chatbot_id: str, query: str, top_k: int = 5
    ) -> Any:
        return await self.request(
            "/rag/search",
            "POST",
            {"chatbot_id": chatbot_id, "query": query, "top_k": top_k},
        )

    async def run_test_chat(self, chatbot_id: str, query: str) -> dict[str, Any]:
        return await self.request(
            "/rag/chat",
            "POST",
            {
                "chatbot_id": chatbot_id,
                "query": query,
                "top_k": 3,
                "model": "gpt-4o",
                "temperature": 0.7,
            },
        )

    # Stats
    async def get_stats(self, chatbot_id: str) -> dict[str, Any]:
        return await self.request(f"/stats/chatbot/{chatbot_id}")


def _error_detail(response: httpx.Response) -> str | None:
    """Extract ``detail`` from an error body, if it parses."""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict) and data.get("detail"):
        detail = data["detail"]
        return detail if isinstance(detail, str) else str(detail)
    return None
