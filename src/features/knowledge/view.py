"""Knowledge sources view."""

from typing import Any

from src.core.resource import Resource
from src.features.backend.datasource import DataSource
from src.features.backend.models import KnowledgeSource, SearchResult
from src.features.dashboard.views import ConsoleView

from .models import KnowledgeViewState


class KnowledgeView(ConsoleView):
    """
    Documents and websites the chatbot answers from.

    Processing status is owned by the backend; the view only re-reads it.
    A source leaves the list only after the backend confirmed its deletion.
    """

    name = "knowledge"
    state_class = KnowledgeViewState

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sources: Resource[list[KnowledgeSource]] | None = None
        self.search_results: list[SearchResult] | None = None

    def create_resources(self, source: DataSource) -> None:
        self.sources = self.resource(source.list_sources)

    def resources(self) -> list[Resource]:
        return [self.sources] if self.sources else []

    @property
    def items(self) -> list[KnowledgeSource]:
        if self.sources is None or self.sources.data is None:
            return []
        return self.sources.data

    def _append(self, created: KnowledgeSource) -> None:
        self.sources.data = [*self.items, created]

    async def add_document(self, name: str, content: str) -> bool:
        if not name.strip() or not content.strip():
            return self.reject("Please fill in all required fields")

        return await self.mutate(
            "submitting_document",
            lambda source: source.create_document_source(name.strip(), content),
            self._append,
            "Document added successfully! Processing may take a few minutes.",
        )

    async def add_website(self, url: str, max_pages: int = 10, max_depth: int = 2) -> bool:
        if not url.strip():
            return self.reject("Please enter a website URL")

        return await self.mutate(
            "submitting_website",
            lambda source: source.create_website_source(
                url.strip(), max_pages=max_pages, max_depth=max_depth
            ),
            self._append,
            "Website crawling started! This process may take several minutes.",
        )

    def _listed(self, source_id: str) -> bool:
        return any(str(s.id) == source_id for s in self.items)

    async def delete_source(self, source_id: str) -> bool:
        if not source_id:
            return False
        loaded = self.sources is not None and self.sources.data is not None
        if loaded and not self._listed(source_id):
            return self.reject("Knowledge source not found")

        def remove(_: None) -> None:
            self.sources.data = [s for s in self.items if str(s.id) != source_id]

        return await self.mutate(
            "deleting",
            lambda source: source.delete_source(source_id),
            remove,
            "Knowledge source deleted successfully",
        )

    async def refresh_source(self, source_id: str) -> bool:
        """Re-read one source to pick up a processing status change."""

        def replace(updated: KnowledgeSource) -> None:
            if not self._listed(source_id):
                self.sources.data = [*self.items, updated]
                return
            self.sources.data = [
                updated if str(s.id) == source_id else s for s in self.items
            ]

        return await self.mutate(
            "refreshing",
            lambda source: source.get_source(source_id),
            replace,
        )

    async def search(self, query: str, top_k: int = 5) -> bool:
        if not query.strip():
            return self.reject("Please enter a search query")

        def store(results: list[SearchResult]) -> None:
            self.search_results = results

        return await self.mutate(
            "searching",
            lambda source: source.search(query.strip(), top_k=top_k),
            store,
        )

    def view_state(self) -> dict[str, Any]:
        return {"sources": self.items, "search_results": self.search_results}
