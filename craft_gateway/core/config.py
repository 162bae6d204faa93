"""
Application configuration loaded from environment variables.

Uses pydantic-settings for type-safe env var parsing with automatic
.env file loading. The OpenAI key only ever lives here — it is never
accepted from, or returned to, a client.

To extend: add new fields here and document them in .env.example.
See https://docs.pydantic.dev/latest/concepts/pydantic_settings/
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ─── Core ──────────────────────────────────────────────────────
    environment: str = "development"
    debug: bool = False

    # ─── Server ────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 3000

    # Requests with a larger body are rejected with 413.
    max_body_bytes: int = 10 * 1024

    # ─── CORS ──────────────────────────────────────────────────────
    # Comma-separated allowed origins. "*" lets the game run from any host.
    cors_origins_str: str = "*"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins_str.split(",") if o.strip()]

    # ─── AI ────────────────────────────────────────────────────────
    # Get from https://platform.openai.com/api-keys
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"

    # Low temperature + tiny budget keeps replies short and repeatable.
    openai_temperature: float = 0.2
    openai_max_tokens: int = 50
    openai_timeout_seconds: float = 20.0

    # When True, completion calls return canned replies and no key is needed.
    # Never enable in production.
    ai_mock_mode: bool = False

    # Empty → use the crafting_instructions.txt bundled with the package.
    crafting_instructions_path: str = ""

    # ─── Rate limiting ─────────────────────────────────────────────
    # Strings use the `limits` notation: "<count> per <n> <unit>".
    rate_limit_enabled: bool = True
    general_rate_limit: str = "100 per 15 minutes"
    strict_rate_limit: str = "10 per minute"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Don't fail on unknown env vars
    )


# Module-level singleton — import this everywhere instead of instantiating Settings()
settings = Settings()
