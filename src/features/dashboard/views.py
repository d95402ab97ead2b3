"""Shared lifecycle for dashboard views."""

import logging
from collections import OrderedDict
from enum import Enum
from typing import Any, Awaitable, Callable, ClassVar, TypeVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from src.config import Settings
from src.core.api_client import APIError
from src.core.resource import Banner, BannerState, Resource, ResourceStatus
from src.features.auth.session import Identity, SessionContext, SessionError
from src.features.backend.datasource import DataSource, DataSourceFactory

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Why a view is in its error state."""

    NO_SESSION = "no_session"
    NO_CHATBOT = "no_chatbot"
    SESSION_FAILURE = "session_failure"
    FETCH = "fetch"


# Errors that replace the whole view with a prompt to sign in again
SESSION_ERRORS = {ErrorKind.NO_SESSION, ErrorKind.NO_CHATBOT, ErrorKind.SESSION_FAILURE}

ERROR_STATUS_CODES = {
    ErrorKind.NO_SESSION: 401,
    ErrorKind.SESSION_FAILURE: 401,
    ErrorKind.NO_CHATBOT: 403,
}


class ViewState(BaseModel):
    """Serialized state common to every view."""

    view: str
    status: ResourceStatus
    chatbot_id: str | None = None
    error: str | None = None
    error_kind: ErrorKind | None = None
    login_url: str | None = None
    banner: BannerState | None = None
    busy: list[str] = Field(default_factory=list)


class ConsoleView:
    """
    Base class for a dashboard view.

    Mounting resolves the session identity and its chatbot, then fetches the
    view's resources. Mutations go through ``mutate``, which tracks a busy
    flag, shows a banner for the outcome and leaves the view interactive.
    Nothing is applied once the view has been unmounted.
    """

    name: ClassVar[str] = "view"
    state_class: ClassVar[type[ViewState]] = ViewState

    def __init__(
        self,
        session: SessionContext,
        data_source_factory: DataSourceFactory,
        settings: Settings,
    ):
        self.session = session
        self.data_source_factory = data_source_factory
        self.settings = settings

        self.status = ResourceStatus.LOADING
        self.error: str | None = None
        self.error_kind: ErrorKind | None = None
        self.identity: Identity | None = None
        self.chatbot_id: str | None = None
        self.source: DataSource | None = None
        self.mounted = False
        self.busy: set[str] = set()
        self._banner: Banner | None = None

    # Lifecycle
    async def mount(self) -> "ConsoleView":
        self.mounted = True
        self.status = ResourceStatus.LOADING

        try:
            identity = await self.session.get_identity()
        except SessionError as e:
            logger.warning("Error loading user data: %s", e)
            self._fail(ErrorKind.SESSION_FAILURE, "Error loading user data")
            return self

        if identity is None:
            self._fail(ErrorKind.NO_SESSION, "No active session")
            return self

        if not identity.chatbot_id:
            self._fail(ErrorKind.NO_CHATBOT, "No chatbot assigned to this user")
            return self

        self.identity = identity
        self.chatbot_id = identity.chatbot_id
        self.source = self.data_source_factory(identity, identity.chatbot_id)
        self.create_resources(self.source)
        await self.load()
        return self

    def unmount(self) -> None:
        self.mounted = False

    def create_resources(self, source: DataSource) -> None:
        """Set up the view's Resource objects."""

    def resources(self) -> list[Resource]:
        return []

    def resource(self, fetch: Callable[[], Awaitable[T]]) -> Resource[T]:
        return Resource(fetch, is_active=lambda: self.mounted)

    async def load(self) -> None:
        resources = self.resources()
        for resource in resources:
            await resource.refetch()

        if not self.mounted:
            return

        failed = next((r for r in resources if r.status == ResourceStatus.ERROR), None)
        if failed is not None:
            self._fail(ErrorKind.FETCH, failed.error)
            return

        self.status = ResourceStatus.READY
        self.error = None
        self.error_kind = None
        self.on_loaded()

    def on_loaded(self) -> None:
        """Hook run after every successful load."""

    async def refetch(self) -> None:
        if self.source is None:
            return
        self.status = ResourceStatus.LOADING
        await self.load()

    def _fail(self, kind: ErrorKind, message: str | None) -> None:
        self.status = ResourceStatus.ERROR
        self.error_kind = kind
        self.error = message

    # Mutations
    @property
    def can_mutate(self) -> bool:
        return self.source is not None and self.error_kind not in SESSION_ERRORS

    async def mutate(
        self,
        flag: str,
        action: Callable[[DataSource], Awaitable[T]],
        on_success: Callable[[T], None],
        success_message: str | None = None,
    ) -> bool:
        """
        Run one user-triggered mutation.

        Returns:
            True when the backend accepted the change and local state was updated
        """
        if not self.can_mutate:
            return False

        self.busy.add(flag)
        self.status = ResourceStatus.SUBMITTING
        self._banner = None

        try:
            result = await action(self.source)
        except APIError as e:
            if self.mounted:
                self.show_error(e.message)
            return False
        finally:
            self.busy.discard(flag)
            if self.mounted:
                self._settle()

        if not self.mounted:
            return False

        on_success(result)
        if success_message:
            self.show_success(success_message)
        return True

    def reject(self, message: str) -> bool:
        """Report invalid input without calling the backend."""
        if self.can_mutate:
            self.show_error(message)
        return False

    def _settle(self) -> None:
        if self.busy:
            self.status = ResourceStatus.SUBMITTING
        elif self.error_kind is not None:
            self.status = ResourceStatus.ERROR
        else:
            self.status = ResourceStatus.READY

    # Banners
    def show_success(self, message: str) -> None:
        self._banner = Banner("success", message, ttl=self.settings.success_banner_seconds)

    def show_error(self, message: str) -> None:
        self._banner = Banner("error", message)

    @property
    def banner(self) -> Banner | None:
        if self._banner is not None and not self._banner.visible:
            self._banner = None
        return self._banner

    # Serialization
    def view_state(self) -> dict[str, Any]:
        """View-specific fields of the serialized state."""
        return {}

    def snapshot(self) -> ViewState:
        banner = self.banner
        return self.state_class(
            view=self.name,
            status=self.status,
            chatbot_id=self.chatbot_id,
            error=self.error,
            error_kind=self.error_kind,
            login_url=(
                self.settings.login_url if self.error_kind in SESSION_ERRORS else None
            ),
            banner=banner.to_state() if banner else None,
            busy=sorted(self.busy),
            **self.view_state(),
        )


def view_response(view: ConsoleView) -> JSONResponse:
    """Render a view's state, using 401/403 for session-level errors."""
    status_code = ERROR_STATUS_CODES.get(view.error_kind, 200)
    return JSONResponse(
        status_code=status_code,
        content=view.snapshot().model_dump(mode="json"),
    )


class ViewRegistry:
    """Mounted views per session, least recently used evicted first."""

    def __init__(self, max_views: int = 1000):
        self.max_views = max_views
        self._views: OrderedDict[tuple[str, str], ConsoleView] = OrderedDict()

    def __len__(self) -> int:
        return len(self._views)

    def get(self, session_key: str, name: str) -> ConsoleView | None:
        key = (session_key, name)
        view = self._views.get(key)
        if view is not None:
            self._views.move_to_end(key)
        return view

    def put(self, session_key: str, view: ConsoleView) -> None:
        key = (session_key, view.name)
        previous = self._views.pop(key, None)
        if previous is not None and previous is not view:
            previous.unmount()
        self._views[key] = view

        while len(self._views) > self.max_views:
            _, evicted = self._views.popitem(last=False)
            evicted.unmount()

    def drop_session(self, session_key: str) -> int:
        keys = [key for key in self._views if key[0] == session_key]
        for key in keys:
            self._views.pop(key).unmount()
        return len(keys)
