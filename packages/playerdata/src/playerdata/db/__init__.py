"""Database access layer for player account records."""

from .protocol import (
    DEFAULT_RANK,
    PlayerId,
    PlayerRecord,
    PlayerRecordStore,
    StoreConfigurationError,
    normalize_player_id,
)
from .sql import SQLPlayerRecordStore
from .factory import create_player_store
from .urls import resolve_url

__all__ = [
    "DEFAULT_RANK",
    "PlayerId",
    "PlayerRecord",
    "PlayerRecordStore",
    "StoreConfigurationError",
    "normalize_player_id",
    "SQLPlayerRecordStore",
    "create_player_store",
    "resolve_url",
]
