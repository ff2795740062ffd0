"""
Player Store Configuration

Connection settings for the player record store. Values not passed
explicitly are read from PLAYER_DB_* environment variables.
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DATABASE_URL = "sqlite:///data/players.db"


class StoreSettings(BaseSettings):
    """
    Settings used to build a player record store.

    Environment variables: PLAYER_DB_URL, PLAYER_DB_USERNAME,
    PLAYER_DB_PASSWORD, PLAYER_DB_POOL_SIZE, PLAYER_DB_POOL_TIMEOUT and
    PLAYER_DB_STATEMENT_CACHE_SIZE.
    """

    model_config = SettingsConfigDict(env_prefix="PLAYER_DB_")

    url: str = Field(
        default=DEFAULT_DATABASE_URL,
        min_length=1,
        description="SQLAlchemy or jdbc: connection URL",
    )
    username: Optional[str] = Field(default=None, description="Database user")
    password: Optional[str] = Field(default=None, description="Database password")
    pool_size: int = Field(default=15, gt=0, description="Maximum pooled connections")
    pool_timeout: float = Field(
        default=30.0, gt=0, description="Seconds to wait for a free connection"
    )
    statement_cache_size: int = Field(
        default=250, ge=0, description="Compiled statement cache entries (0 disables)"
    )

    @classmethod
    def from_env(cls) -> "StoreSettings":
        """Settings taken entirely from the environment and defaults."""
        return cls()
