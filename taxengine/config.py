"""
config.py — Tax engine application settings.

Usage:
    from taxengine.config import settings
    print(settings.app_version)

Never use FastAPI Depends() for settings — import directly as a module-level singleton.
"""
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore any extra env vars
    )

    # --- Identity tokens ---
    # Shared HS256 secret with the auth collaborator that issues bearer tokens.
    # Generate with: python -c "import secrets; print(secrets.token_hex(32))"
    secret_key: str = "change-me-in-production-at-least-32-chars"
    jwt_algorithm: str = "HS256"

    # --- Statutory rule tables ---
    # Path to a JSON file overriding the packaged rules/tax_rules.json.
    # Loaded once per process; never mutated afterwards.
    rule_tables_path: Optional[str] = None

    # --- Export document footer ---
    company_name: str = "CHRONYX by Cropxon Innovations Pvt. Ltd."
    support_email: str = "support@chronyx.in"

    # --- CORS ---
    # Comma-separated list of allowed frontend origins
    cors_origins: str = "http://localhost:5173,http://localhost:5174"

    # --- Application ---
    app_name: str = "Tax Engine"
    debug: bool = True
    app_version: str = "0.1.0"

    @property
    def cors_origins_list(self) -> List[str]:
        """Split comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


# Module-level singleton — import this throughout the codebase
settings = Settings()
