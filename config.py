# config.py
from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide settings, read once from the environment and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    port: int = 5000

    # MongoDB
    mongo_uri: str
    mongo_db_name: str = "cinesearch"

    # JWT
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24

    # OMDb
    omdb_api_key: str = ""
    omdb_base_url: str = "http://www.omdbapi.com/"
    omdb_timeout_seconds: float = 10.0

    # "plaintext" keeps stored passwords byte-identical to what users sent
    password_scheme: Literal["plaintext", "bcrypt"] = "plaintext"

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
