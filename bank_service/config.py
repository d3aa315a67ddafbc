"""Configuración del servicio leída desde variables de entorno (y archivo .env)."""

import os
import logging
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./Bank.db"


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Runtime settings for the Bank Service. Built once and injected into the app."""

    access_token_secret: str = Field(..., min_length=1, repr=False)
    access_token_expire_minutes: int = Field(60 * 24, ge=0)
    database_url: str = DEFAULT_DATABASE_URL
    bcrypt_rounds: int = Field(10, ge=4, le=31)
    allow_banker_self_registration: bool = False
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Carga la configuración desde el entorno.
        Lanza EnvironmentError si falta el secreto de firma de tokens.
        """
        load_dotenv()

        secret = os.getenv("ACCESS_TOKEN_SECRET")
        if not secret:
            logger.critical("ACCESS_TOKEN_SECRET no está definida. El servicio no puede firmar tokens.")
            raise EnvironmentError("Missing required environment variable: ACCESS_TOKEN_SECRET")

        origins = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

        return cls(
            access_token_secret=secret,
            access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24)),
            database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", 10)),
            allow_banker_self_registration=_env_bool("ALLOW_BANKER_SELF_REGISTRATION"),
            cors_origins=origins or ["*"],
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", 3000)),
        )
