"""Session provider adapters and the per-request session context."""

import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
import jwt
from pydantic import BaseModel, Field

from src.config import Settings

from .jwt import decode_session_token, extract_access_token, hash_session_token

logger = logging.getLogger(__name__)


class SessionError(Exception):
    """The session provider could not be consulted."""


class Identity(BaseModel):
    """Signed-in user as reported by the session provider."""

    id: str
    email: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def api_key(self) -> str | None:
        return self.metadata.get("apiKey") or None

    @property
    def chatbot_id(self) -> str | None:
        chatbot_id = self.metadata.get("chatbotId")
        return str(chatbot_id) if chatbot_id else None


class SessionProvider(ABC):
    """Resolves session tokens to identities."""

    @abstractmethod
    async def get_identity(self, access_token: str) -> Identity | None:
        """Return the identity for a token, or None when it is not a live session."""

    @abstractmethod
    async def sign_out(self, access_token: str) -> None:
        """End the session."""


class TokenSessionProvider(SessionProvider):
    """Reads identity from locally verified HS256 session tokens."""

    def __init__(self, jwt_secret: str = "", allow_unverified: bool = False):
        self.jwt_secret = jwt_secret
        self.allow_unverified = allow_unverified

    async def get_identity(self, access_token: str) -> Identity | None:
        if not self.jwt_secret and not self.allow_unverified:
            logger.warning("No session secret configured, rejecting session")
            return None

        try:
            payload = decode_session_token(
                access_token,
                self.jwt_secret or None,
                verify=bool(self.jwt_secret),
            )
        except jwt.InvalidTokenError as e:
            logger.info("Rejected session token: %s", e)
            return None

        return Identity(
            id=payload.sub,
            email=payload.email,
            metadata=payload.user_metadata,
        )

    async def sign_out(self, access_token: str) -> None:
        # Tokens are stateless; clearing the cookie is enough
        return None


class RemoteSessionProvider(SessionProvider):
    """Asks the hosted auth service who owns a token."""

    def __init__(
        self,
        base_url: str,
        public_key: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.public_key = public_key
        self.transport = transport

    def _headers(self, access_token: str) -> dict[str, str]:
        return {
            "apikey": self.public_key,
            "Authorization": f"Bearer {access_token}",
        }

    async def get_identity(self, access_token: str) -> Identity | None:
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.get(
                    f"{self.base_url}/auth/v1/user",
                    headers=self._headers(access_token),
                )
        except httpx.HTTPError as e:
            logger.warning("Session provider unreachable: %s", e)
            raise SessionError(f"Session provider unreachable: {e}") from e

        if response.status_code in (401, 403):
            return None
        if not response.is_success:
            logger.warning("Session provider returned %s", response.status_code)
            raise SessionError(
                f"Session provider returned status {response.status_code}"
            )

        try:
            user = response.json()
            return Identity(
                id=str(user["id"]),
                email=user.get("email"),
                metadata=user.get("user_metadata") or {},
            )
        except (ValueError, KeyError, TypeError) as e:
            raise SessionError("Session provider returned an invalid user") from e

    async def sign_out(self, access_token: str) -> None:
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/auth/v1/logout",
                    headers=self._headers(access_token),
                )
        except httpx.HTTPError as e:
            raise SessionError(f"Session provider unreachable: {e}") from e

        # An already expired session is as good as signed out
        if not response.is_success and response.status_code not in (401, 403):
            raise SessionError(
                f"Sign out failed with status {response.status_code}"
            )


class SessionContext:
    """The current request's session, as seen by views."""

    def __init__(self, provider: SessionProvider, cookie_value: str | None):
        self.provider = provider
        self.cookie_value = cookie_value or ""
        self.access_token = extract_access_token(self.cookie_value)
        self._identity: Identity | None = None

    @property
    def key(self) -> str:
        """Stable key for this session's server-side state."""
        return hash_session_token(self.cookie_value)

    def has_session(self) -> bool:
        return self.access_token is not None

    async def get_identity(self) -> Identity | None:
        """
        Get the signed-in identity.

        Raises:
            SessionError: If the provider failed to answer
        """
        if self.access_token is None:
            return None
        if self._identity is None:
            self._identity = await self.provider.get_identity(self.access_token)
        return self._identity

    async def sign_out(self) -> None:
        if self.access_token is not None:
            await self.provider.sign_out(self.access_token)
        self._identity = None


def build_session_provider(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SessionProvider:
    """Pick the session provider for the configured environment."""
    if settings.session_provider_url:
        return RemoteSessionProvider(
            settings.session_provider_url,
            settings.session_public_key,
            transport=transport,
        )
    return TokenSessionProvider(
        settings.session_jwt_secret,
        allow_unverified=settings.demo_mode,
    )
