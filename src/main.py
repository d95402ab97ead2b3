"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.config import Settings, get_settings
from src.core.rate_limiter import limiter
from src.features.auth.guard import RouteGuardMiddleware
from src.features.auth.router import router as auth_router
from src.features.auth.session import build_session_provider
from src.features.backend.datasource import build_data_source_factory
from src.features.dashboard.views import ViewRegistry

# Dashboard views
from src.features.chat_test.router import router as chat_test_router
from src.features.chatbot.router import router as chatbot_router
from src.features.knowledge.router import router as knowledge_router
from src.features.overview.router import router as overview_router

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup
    settings = app.state.settings
    logger.info(
        "Starting Chatbot Console in %s mode (%s data)",
        settings.app_env,
        "demo" if settings.demo_mode else "live",
    )
    yield
    # Shutdown
    logger.info("Shutting down Chatbot Console")


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Settings to use instead of the environment
        transport: HTTP transport for backend and session provider calls
    """
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Chatbot Console",
        description="Administration console for hosted RAG chatbots",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs" if settings.app_debug else None,
        redoc_url="/redoc" if settings.app_debug else None,
    )

    # Shared state, injected into views through dependencies
    app.state.settings = settings
    app.state.session_provider = build_session_provider(settings, transport=transport)
    app.state.data_source_factory = build_data_source_factory(settings, transport=transport)
    app.state.view_registry = ViewRegistry(max_views=settings.max_mounted_views)

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Route guard for everything under /dashboard
    app.add_middleware(
        RouteGuardMiddleware,
        cookie_name=settings.session_cookie_name,
        login_url=settings.login_url,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(auth_router)
    app.include_router(overview_router)
    app.include_router(chatbot_router)
    app.include_router(chat_test_router)
    app.include_router(knowledge_router)

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": VERSION}

    # API info endpoint
    @app.get("/")
    async def root():
        return {
            "name": "Chatbot Console",
            "version": VERSION,
            "docs": "/docs" if settings.app_debug else None,
            "dashboard": "/dashboard",
            "mode": "demo" if settings.demo_mode else "live",
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_debug,
    )
