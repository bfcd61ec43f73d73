# ticketdesk/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

from ticketdesk.ticket.ids import IdStrategy
from ticketdesk.ticket.schemas import DEFAULT_DESCRIPTION


class Settings(BaseSettings):
    DATABASE_URL: str = Field(default="sqlite:///./tickets.db")
    APP_NAME: str = "Ticket Desk"
    APP_DESC: str = "Slash-command ticket intake with webhook notifications"
    APP_VERSION: str = "1.0.0"

    # comma separated, "*" allows all
    CORS_ORIGINS: str = "*"

    # root URL used to build links to tickets
    BASE_URL: str = "127.0.0.1"
    INSECURE: bool = False

    # schema script executed once at startup
    SETUP_SQL: str | None = "setup.sql"

    ID_STRATEGY: IdStrategy = IdStrategy.RANDOM
    ID_CREATE_ATTEMPTS: int = Field(default=3, ge=1)
    DEFAULT_DESCRIPTION: str = DEFAULT_DESCRIPTION

    WEBHOOK_TIMEOUT: float = Field(default=5.0, gt=0)
    WEBHOOK_MAX_ATTEMPTS: int = Field(default=1, ge=1)
    WEBHOOK_BACKOFF: float = Field(default=0.5, ge=0)

    LOG_LEVEL: str = "INFO"

    # Pydantic v2 style config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def public_base_url(self) -> str:
        url = self.BASE_URL.strip()
        if not url.startswith(("http://", "https://")):
            url = ("http://" if self.INSECURE else "https://") + url
        if not url.endswith("/"):
            url += "/"
        return url

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
