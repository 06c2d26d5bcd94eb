from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_env_file() -> str | None:
    cur = Path(__file__).resolve()
    for parent in [cur.parent, *cur.parents]:
        candidate = parent / ".env"
        if candidate.exists():
            return str(candidate)
    return None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_find_env_file() or ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # resource service
    API_BASE_URL: str = "http://localhost:8000"
    HTTP_TIMEOUT_SEC: Optional[float] = None

    # token storage
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    TOKEN_SLOT: str = "auth-token"

    # bot
    BOT_TOKEN: str = ""


settings = Settings()
