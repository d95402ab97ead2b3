"""Knowledge source request and response models."""

from pydantic import BaseModel, Field

from src.features.backend.models import KnowledgeSource, SearchResult
from src.features.dashboard.views import ViewState


class DocumentSourceCreate(BaseModel):
    """Pasted document to ingest. Blank fields are reported on the view."""

    name: str = ""
    content: str = ""


class WebsiteSourceCreate(BaseModel):
    """Website to crawl."""

    url: str = ""
    max_pages: int = Field(default=10, ge=1, le=500)
    max_depth: int = Field(default=2, ge=0, le=10)


class KnowledgeSearchRequest(BaseModel):
    """Search over the chatbot's knowledge base."""

    query: str = ""
    top_k: int = Field(default=5, ge=1, le=20)


class KnowledgeViewState(ViewState):
    """Knowledge sources state."""

    sources: list[KnowledgeSource] = Field(default_factory=list)
    search_results: list[SearchResult] | None = None
