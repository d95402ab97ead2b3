"""Knowledge source endpoints."""

from fastapi import APIRouter, Depends

from src.features.dashboard.context import ConsoleContext, get_console_context
from src.features.dashboard.views import view_response

from .models import (
    DocumentSourceCreate,
    KnowledgeSearchRequest,
    KnowledgeViewState,
    WebsiteSourceCreate,
)
from .view import KnowledgeView

router = APIRouter(prefix="/dashboard/knowledge", tags=["knowledge"])


@router.get("", response_model=KnowledgeViewState)
async def list_sources(context: ConsoleContext = Depends(get_console_context)):
    """Mount the knowledge sources view."""
    view = await context.mount(KnowledgeView)
    return view_response(view)


@router.post("/documents", response_model=KnowledgeViewState)
async def add_document(
    data: DocumentSourceCreate,
    context: ConsoleContext = Depends(get_console_context),
):
    """Add a pasted document as a knowledge source."""
    view = await context.current(KnowledgeView)
    await view.add_document(data.name, data.content)
    return view_response(view)


@router.post("/websites", response_model=KnowledgeViewState)
async def add_website(
    data: WebsiteSourceCreate,
    context: ConsoleContext = Depends(get_console_context),
):
    """Start crawling a website into the knowledge base."""
    view = await context.current(KnowledgeView)
    await view.add_website(data.url, max_pages=data.max_pages, max_depth=data.max_depth)
    return view_response(view)


@router.post("/search", response_model=KnowledgeViewState)
async def search_knowledge(
    data: KnowledgeSearchRequest,
    context: ConsoleContext = Depends(get_console_context),
):
    """Search the knowledge base the way the chatbot retrieves from it."""
    view = await context.current(KnowledgeView)
    await view.search(data.query, top_k=data.top_k)
    return view_response(view)


@router.post("/{source_id}/refresh", response_model=KnowledgeViewState)
async def refresh_source(
    source_id: str,
    context: ConsoleContext = Depends(get_console_context),
):
    """Re-read one source's processing status."""
    view = await context.current(KnowledgeView)
    await view.refresh_source(source_id)
    return view_response(view)


@router.delete("/{source_id}", response_model=KnowledgeViewState)
async def delete_source(
    source_id: str,
    context: ConsoleContext = Depends(get_console_context),
):
    """Delete a knowledge source."""
    view = await context.current(KnowledgeView)
    await view.delete_source(source_id)
    return view_response(view)
