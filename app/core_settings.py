from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    # Full SQLAlchemy URL; when unset the PostgreSQL parts below are used
    DATABASE_URL: Optional[str] = None
    POSTGRES_HOST: str = "postgres"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "ecommerce_store"
    POSTGRES_USER: str = "store"
    POSTGRES_PASSWORD: str = "store"
    DB_ECHO: bool = False
    # Only used when the server is MySQL/MariaDB
    DB_CHARSET: str = "utf8mb4"
    DB_COLLATION: str = "utf8mb4_unicode_ci"
    DB_WAIT_ATTEMPTS: int = 30
    DB_WAIT_SECONDS: float = 1.0
    LOG_LEVEL: str = "INFO"
    SERVICE_NAME: str = "ecommerce-store"
    ENVIRONMENT: str = "development"

    class Config:
        env_file = ".env"

@lru_cache
def get_settings() -> Settings:
    return Settings()

def get_database_url(settings: Optional[Settings] = None) -> str:
    settings = settings or get_settings()
    if settings.DATABASE_URL:
        return settings.DATABASE_URL
    return f"postgresql+psycopg2://{settings.POSTGRES_USER}:{settings.POSTGRES_PASSWORD}@{settings.POSTGRES_HOST}:{settings.POSTGRES_PORT}/{settings.POSTGRES_DB}"
