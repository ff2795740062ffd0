"""Factory for creating player record stores from settings."""

import logging
from typing import Optional

from ..config import StoreSettings
from .sql import SQLPlayerRecordStore


def create_player_store(
    settings: Optional[StoreSettings] = None,
    logger: Optional[logging.Logger] = None,
) -> SQLPlayerRecordStore:
    """
    Create a new store.

    Uses settings from the environment when none are given. Each call
    returns a new store with its own pool; the caller owns it and must
    call disconnect() when done.
    """
    if settings is None:
        settings = StoreSettings.from_env()

    return SQLPlayerRecordStore(
        settings.url,
        settings.username,
        settings.password,
        logger=logger,
        pool_size=settings.pool_size,
        statement_cache_size=settings.statement_cache_size,
        pool_timeout=settings.pool_timeout,
    )
