"""
Application configuration using Pydantic Settings
"""
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables
    """
    # Database
    DATABASE_URL: str = "sqlite:///gropact.db"

    # Application
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Store bootstrap: populate demo user/pacts/rooms on first run
    SEED_DEMO_DATA: bool = True

    # Login is login-or-register; flip this to check stored password hashes
    REQUIRE_PASSWORD_MATCH: bool = False

    # AI planning agent
    AGENT_URL: str = ""
    AGENT_ID: str = ""
    AGENT_API_KEY: str = ""
    AGENT_TIMEOUT_SECONDS: float | None = None  # None = wait for the agent

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    def get_sqlalchemy_url(self) -> str:
        """
        Convert DATABASE_URL to SQLAlchemy format (postgresql+psycopg://)
        """
        url = self.DATABASE_URL
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+psycopg://", 1)
        return url


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings instance (singleton)
    """
    return Settings()
