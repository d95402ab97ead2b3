"""Fetch state for view resources."""

import time
from enum import Enum
from typing import Awaitable, Callable, Generic, Literal, TypeVar

from pydantic import BaseModel

from src.core.api_client import APIError

T = TypeVar("T")


class ResourceStatus(str, Enum):
    """Lifecycle of a view or one of its resources."""

    LOADING = "loading"
    READY = "ready"
    SUBMITTING = "submitting"
    ERROR = "error"


class Resource(Generic[T]):
    """
    One fetched resource with its loading and error state.

    ``refetch`` runs the fetch operation again. When ``is_active`` reports
    False by the time the response arrives (the owning view was unmounted),
    the result is dropped and state is left untouched.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[T]],
        is_active: Callable[[], bool] = lambda: True,
    ):
        self._fetch = fetch
        self._is_active = is_active
        self.data: T | None = None
        self.status = ResourceStatus.LOADING
        self.error: str | None = None

    @property
    def ready(self) -> bool:
        return self.status == ResourceStatus.READY

    async def refetch(self) -> T | None:
        self.status = ResourceStatus.LOADING
        try:
            data = await self._fetch()
        except APIError as e:
            if self._is_active():
                self.status = ResourceStatus.ERROR
                self.error = e.message
            return None

        if not self._is_active():
            return None

        self.data = data
        self.status = ResourceStatus.READY
        self.error = None
        return data


class BannerState(BaseModel):
    """Serialized banner."""

    kind: Literal["success", "error"]
    message: str


class Banner:
    """Inline notice; success banners dismiss themselves after a delay."""

    def __init__(
        self,
        kind: Literal["success", "error"],
        message: str,
        ttl: float | None = None,
    ):
        self.kind = kind
        self.message = message
        self.expires_at = time.monotonic() + ttl if ttl is not None else None

    @property
    def visible(self) -> bool:
        return self.expires_at is None or time.monotonic() < self.expires_at

    def to_state(self) -> BannerState:
        return BannerState(kind=self.kind, message=self.message)
