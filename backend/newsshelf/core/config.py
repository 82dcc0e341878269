from pydantic_settings import BaseSettings
from typing import List, Union, Optional
from pydantic import field_validator


class Settings(BaseSettings):
    # Database
    POSTGRES_USER: str = "newsshelf"
    POSTGRES_PASSWORD: str
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "newsshelf"
    DATABASE_URL_OVERRIDE: Optional[str] = None  # Any SQLAlchemy URL (e.g. sqlite)

    @property
    def DATABASE_URL(self) -> str:
        """Construct database URL from components."""
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Document stores
    STORE_MAX_ATTEMPTS: int = 3  # Versioned read-modify-write attempts per mutation

    # Admin dashboard
    ADMIN_API_KEY: str
    ADMIN_TOP_ARTICLES: int = 10
    API_KEY_MASK_PREFIX: int = 8  # Characters of a credential shown before "..."

    # News search API
    NEWS_API_BASE_URL: str = "https://newsapi.org/v2"
    NEWS_API_TIMEOUT: float = 15.0  # seconds
    NEWS_DEFAULT_PAGE_SIZE: int = 20
    NEWS_LANGUAGE: str = "en"

    # Application
    DEBUG: bool = False
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            # Split by comma or keep as single item
            return [origin.strip() for origin in v.split(",")]
        return v

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    DEFAULT_RATE_LIMIT: str = "100/minute"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env


settings = Settings()
