from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    webhook_secret: str
    firebase_db_url: str
    forward_timeout: float = 10.0  # seconds
    max_body_size: int = 1_048_576  # 1 MiB
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore", "frozen": True}

    @field_validator("firebase_db_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        # Paths are appended as "/devices/..."
        return value.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]
