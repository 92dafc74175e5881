import logging
from typing import Optional

from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DB_URL: str = "sqlite:///./httpaction.db"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"
    HTTP_TIMEOUT: Optional[float] = None  # seconds; None keeps the transport default
    MAX_RESPONSE_BYTES: int = 10 * 1024 * 1024

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()


def configure_logging(level: Optional[str] = None):
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
