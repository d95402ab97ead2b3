"""FastAPI session dependencies."""

from fastapi import Depends, HTTPException, Request, status

from .session import Identity, SessionContext, SessionError


def get_session_context(request: Request) -> SessionContext:
    """Wrap the request's session cookie with the application's provider."""
    settings = request.app.state.settings
    return SessionContext(
        provider=request.app.state.session_provider,
        cookie_value=request.cookies.get(settings.session_cookie_name),
    )


async def get_current_identity(
    session: SessionContext = Depends(get_session_context),
) -> Identity:
    """
    Require a signed-in identity.

    Used by endpoints that do not go through a dashboard view.
    """
    try:
        identity = await session.get_identity()
    except SessionError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Error loading user data",
        )

    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No active session",
        )

    return identity
