"""Session handling and route protection."""

from .jwt import (
    create_session_token,
    decode_session_token,
    extract_access_token,
    hash_session_token,
)
from .dependencies import get_current_identity, get_session_context
from .session import (
    Identity,
    RemoteSessionProvider,
    SessionContext,
    SessionError,
    SessionProvider,
    TokenSessionProvider,
    build_session_provider,
)

__all__ = [
    "create_session_token",
    "decode_session_token",
    "extract_access_token",
    "hash_session_token",
    "get_current_identity",
    "get_session_context",
    "Identity",
    "RemoteSessionProvider",
    "SessionContext",
    "SessionError",
    "SessionProvider",
    "TokenSessionProvider",
    "build_session_provider",
]
