"""Rate limiting configuration for console endpoints."""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from src.features.auth.jwt import hash_session_token


def get_rate_limit_key(request: Request) -> str:
    """Get the session as key for dashboard endpoints, IP otherwise."""
    path = request.url.path
    if path.startswith("/dashboard"):
        cookie = request.cookies.get(request.app.state.settings.session_cookie_name)
        if cookie:
            return f"session:{hash_session_token(cookie)}"

    return get_remote_address(request)


limiter = Limiter(key_func=get_rate_limit_key)
