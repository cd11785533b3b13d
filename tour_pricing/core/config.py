from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./rates.db"

    REDIS_URL: Optional[str] = None
    # quotes depend on editable rate tables, a cached quote can be stale for up to this long
    PRICE_CACHE_TTL: int = 0   # seconds, 0 disables the quote cache

    CURRENCY: str = "EUR"
    DEFAULT_CITY: str = "Cairo"
    DEFAULT_TRANSPORTATION_SERVICE: str = "day_tour"
    DEFAULT_LANGUAGE: str = "English"

    API_TITLE: str = "Tour Pricing Service"
    API_DESCRIPTION: str = "Quotes guided day tours and multi-day packages from the rate tables"
    API_VERSION: str = "1.0.0"

    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()
