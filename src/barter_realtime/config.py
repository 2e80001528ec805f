from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    POSTGRES_USER: str = "barter"
    POSTGRES_PASSWORD: str = "barter"
    POSTGRES_DB: str = "barter"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 300

    JWT_SECRET: str = ""
    JWT_VERIFY_MODE: Literal["hs256", "jwks"] = "hs256"
    JWT_ALGORITHM: str = "HS256"
    JWKS_URL: str | None = None
    # Claim holding the user id; "sub" is used when it is absent.
    JWT_USER_CLAIM: str = "id"

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    WS_HEARTBEAT_SECONDS: int = 30
    WS_ENFORCE_ROOM_ACCESS: bool = False

    MESSAGE_PERSISTENCE_ENABLED: bool = True

    LOG_LEVEL: str = "INFO"

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.POSTGRES_DB}"
        )

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
