"""Login landing and sign-out endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from .dependencies import get_current_identity, get_session_context
from .session import Identity, SessionContext, SessionError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.get("/login")
async def login(request: Request):
    """
    Login landing.

    Signing in happens with the session provider; this only tells the front
    end where to go and whether a session cookie is already present.
    """
    settings = request.app.state.settings
    return {
        "session_provider_url": settings.session_provider_url or None,
        "cookie_name": settings.session_cookie_name,
        "has_session_cookie": bool(request.cookies.get(settings.session_cookie_name)),
        "dashboard_url": "/dashboard",
    }


@router.get("/session")
async def current_session(identity: Identity = Depends(get_current_identity)):
    """Who is signed in, without exposing the backend credential."""
    return {
        "id": identity.id,
        "email": identity.email,
        "chatbot_id": identity.chatbot_id,
        "has_api_key": identity.api_key is not None,
    }


@router.post("/logout")
async def logout(
    request: Request,
    session: SessionContext = Depends(get_session_context),
):
    """Sign out, forget the session's views and clear the cookie."""
    settings = request.app.state.settings

    try:
        await session.sign_out()
    except SessionError as e:
        logger.warning("Sign out failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e),
        )

    dropped = request.app.state.view_registry.drop_session(session.key)
    logger.info("Signed out, dropped %d view(s)", dropped)

    response = RedirectResponse(url=settings.login_url, status_code=303)
    response.delete_cookie(settings.session_cookie_name)
    return response
