"""Request-scoped access to a session's dashboard views."""

from typing import TypeVar

from fastapi import Depends, Request

from src.config import Settings
from src.features.auth.dependencies import get_session_context
from src.features.auth.session import SessionContext, SessionError
from src.features.backend.datasource import DataSourceFactory

from .views import ConsoleView, ViewRegistry

V = TypeVar("V", bound=ConsoleView)


class ConsoleContext:
    """Mounts and looks up views for the current session."""

    def __init__(
        self,
        session: SessionContext,
        registry: ViewRegistry,
        data_source_factory: DataSourceFactory,
        settings: Settings,
    ):
        self.session = session
        self.registry = registry
        self.data_source_factory = data_source_factory
        self.settings = settings

    async def mount(self, view_class: type[V]) -> V:
        """Mount a fresh view, replacing any previous instance."""
        view = view_class(self.session, self.data_source_factory, self.settings)
        self.registry.put(self.session.key, view)
        await view.mount()
        return view

    async def current(self, view_class: type[V]) -> V:
        """
        Get the mounted view for this session, mounting it if needed.

        The view is remounted when the session no longer resolves to the
        identity it was mounted for.
        """
        view = self.registry.get(self.session.key, view_class.name)
        if view is None or not view.mounted or view.identity is None:
            return await self.mount(view_class)

        try:
            identity = await self.session.get_identity()
        except SessionError:
            identity = None
        if identity is None or identity.id != view.identity.id:
            return await self.mount(view_class)
        return view


def get_console_context(
    request: Request,
    session: SessionContext = Depends(get_session_context),
) -> ConsoleContext:
    """Build the console context from application state."""
    state = request.app.state
    return ConsoleContext(
        session=session,
        registry=state.view_registry,
        data_source_factory=state.data_source_factory,
        settings=state.settings,
    )
