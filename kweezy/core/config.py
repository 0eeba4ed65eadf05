"""
Application settings
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Kweezy Reader API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DB_USERNAME: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "kweezy"
    DATABASE_URL_OVERRIDE: Optional[str] = None  # e.g. sqlite+aiosqlite:///./kweezy.db

    # JWT
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # CORS
    CORS_ORIGINS: list = ["*"]

    # Pagination
    COMMENTS_DEFAULT_LIMIT: int = 10
    COMMENTS_MAX_LIMIT: int = 50
    BLOG_DEFAULT_LIMIT: int = 5
    BLOG_MAX_LIMIT: int = 20

    # Reader client
    API_BASE_URL: str = "http://localhost:3001/api"
    AUTOSAVE_INTERVAL_SECONDS: float = 4.0
    PRELOAD_SEGMENT_COUNT: int = 10

    @property
    def DATABASE_URL(self) -> str:
        """Database connection URL"""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+asyncpg://{self.DB_USERNAME}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env")


settings = Settings()
