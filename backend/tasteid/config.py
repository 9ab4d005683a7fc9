"""Configuration settings for the TasteID backend"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "TasteID"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Database Settings
    POSTGRES_USER: str = "tasteid"
    POSTGRES_PASSWORD: str = "tasteid_pass"
    POSTGRES_HOST: str = "postgres"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "tasteid"
    DATABASE_URL_OVERRIDE: Optional[str] = None  # e.g. sqlite:///./tasteid.db for local runs
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    SQL_ECHO: bool = False

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Redis Settings
    REDIS_HOST: str = "redis"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None

    @property
    def REDIS_URL(self) -> str:
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    # Auth Settings
    SECRET_KEY: str = "change-me-in-production"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 30
    AUTH_PROVIDER_SECRET: str = "change-me-provider-secret"

    # Profile defaults
    DEFAULT_ACCENT_COLOR: str = "#6366f1"
    DEFAULT_BG_TEXTURE: str = "grain"

    # Search provider settings
    TMDB_READ_ACCESS_TOKEN: Optional[str] = None
    GOOGLE_BOOKS_KEY: Optional[str] = None
    IGDB_CLIENT_ID: Optional[str] = None
    IGDB_ACCESS_TOKEN: Optional[str] = None
    SEARCH_TIMEOUT_SECONDS: float = 10.0
    SEARCH_PAGE_SIZE: int = 12

    # Cache Settings
    SEARCH_CACHE_TTL: int = 3600  # 1 hour

    # Rate limiting
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    DEFAULT_RATE_LIMIT: str = "200/minute"
    SEARCH_RATE_LIMIT: str = "30/minute"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
