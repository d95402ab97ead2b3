"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Chatbot backend API
    backend_api_url: str = "http://localhost:8000"
    backend_api_key: str = ""  # Fallback when the user has no assigned key

    # Session provider
    session_provider_url: str = ""
    session_public_key: str = ""
    session_jwt_secret: str = ""
    session_cookie_name: str = "sb-auth-token"

    # Console behaviour
    demo_mode: bool = False
    success_banner_seconds: float = 5.0
    login_url: str = "/login"
    max_mounted_views: int = 1000
    max_demo_chatbots: int = 100

    # Embed snippet
    widget_script_url: str = "https://cdn.vocata.ai/widget.js"
    widget_config_var: str = "vocataConfig"

    # Application
    app_env: str = "development"
    app_debug: bool = True
    app_host: str = "0.0.0.0"
    app_port: int = 3000
    log_level: str = "INFO"

    # CORS
    cors_origins: str = "http://localhost:3000"

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
