"""Application configuration via pydantic-settings.

Loads all settings from environment variables with sensible defaults.
A global `settings` singleton is available for import throughout the app.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Ledger backend: "supabase" or "memory"
    LEDGER_BACKEND: str = "supabase"
    LEDGER_TABLE: str = "ledger_entries"

    # Supabase (only read when LEDGER_BACKEND == "supabase")
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""

    # Owner check inside the registry for status updates
    ENFORCE_OWNERSHIP: bool = True

    # CORS
    ALLOWED_ORIGINS: str = "*"

    # Logging
    LOG_LEVEL: str = "INFO"


settings = Settings()
