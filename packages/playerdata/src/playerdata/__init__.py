"""
Player Data

Persistent player account records (balance, rank, identifiers and
free-form metadata) for game servers, stored in MySQL/MariaDB or SQLite
through a pooled SQLAlchemy engine.

Usage:
    from playerdata import create_player_store

    store = create_player_store()
    store.set_balance(player_uuid, 250.0)
    balance = store.get_balance(player_uuid)
    store.disconnect()
"""

from .config import StoreSettings
from .db import (
    DEFAULT_RANK,
    PlayerRecord,
    PlayerRecordStore,
    SQLPlayerRecordStore,
    StoreConfigurationError,
    create_player_store,
)

__all__ = [
    "StoreSettings",
    "DEFAULT_RANK",
    "PlayerRecord",
    "PlayerRecordStore",
    "SQLPlayerRecordStore",
    "StoreConfigurationError",
    "create_player_store",
]
