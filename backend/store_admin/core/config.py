"""
Configuración centralizada de la aplicación
"""
import json
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # API Settings
    API_TITLE: str = "Store Admin API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Admin API for multi-tenant store builder dashboards"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str

    # Auth - same secret the dashboard's NextAuth uses to sign session tokens
    AUTH_SECRET: str = ""

    # Internal same-origin calls (AI actions -> generate/translate)
    INTERNAL_API_BASE_URL: str = "http://localhost:8000"
    INTERNAL_API_TOKEN: str = ""
    INTERNAL_API_TIMEOUT: float = 60.0

    # AI provider
    ANTHROPIC_API_KEY: str = ""
    CLAUDE_MODEL: str = "claude-haiku-4-5-20251001"
    AI_RATE_LIMIT_PER_MINUTE: int = 30

    # Store defaults
    DEFAULT_CURRENCY: str = "USD"

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:3000,https://yourdomain.com" or '["http://localhost:3000"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:3000"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:3000"]

        # Try JSON parse first (for array format)
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]


settings = Settings()
