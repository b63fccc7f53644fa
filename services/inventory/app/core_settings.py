from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional

class Settings(BaseSettings):
    POSTGRES_HOST: str = "postgres"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "sweetshop"
    POSTGRES_USER: str = "sweetshop"
    POSTGRES_PASSWORD: str = "sweetshop"
    # Full SQLAlchemy URL, takes precedence over the POSTGRES_* parts
    DATABASE_URL: Optional[str] = None

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 5
    DB_POOL_RECYCLE: int = 300
    SQLITE_BUSY_TIMEOUT: float = 30.0

    JWT_SECRET: str = "change-me"
    JWT_ALG: str = "HS256"

    LOW_STOCK_THRESHOLD: int = 5

    CATALOG_SERVICE_URL: Optional[str] = None
    CATALOG_TIMEOUT_SECONDS: float = 5.0

    LOG_LEVEL: str = "INFO"
    SERVICE_VERSION: str = "1.0.0"

    class Config:
        env_file = ".env"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

@lru_cache
def get_settings() -> Settings:
    return Settings()
