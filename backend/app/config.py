"""Task Planner configuration — settings loaded once from the environment."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Managed auth provider (Supabase)
    supabase_url: str = ""
    supabase_key: str = ""  # Anon key, sent as the apikey header
    auth_timeout: float = 10.0

    # Database
    database_url: str = "sqlite:///data/tasks.db"

    # AI suggestions (OpenRouter). Empty key = AI routes answer 503.
    openrouter_api_key: str = ""
    openrouter_model: str = "google/gemini-2.0-flash-exp:free"
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_timeout: float = 30.0
    openrouter_app_url: str = "https://task-planner.local"
    openrouter_app_title: str = "Task Planner"

    # Feature flags (FF_* env vars)
    ff_ai_suggestions: bool = True

    # Public origin used in email redirect links. Empty = derived from the request.
    site_url: str = ""

    # CORS (comma-separated origins)
    cors_origins: str = "http://localhost:3000"

    # Session cookies
    access_cookie_name: str = "sb-access-token"
    refresh_cookie_name: str = "sb-refresh-token"
    refresh_cookie_max_age: int = 60 * 60 * 24 * 30
    cookie_secure: bool = False

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @property
    def ai_enabled(self) -> bool:
        return bool(self.openrouter_api_key) and self.ff_ai_suggestions

    @property
    def auth_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


settings = Settings()
