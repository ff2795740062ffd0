"""Store protocol and data model for player account records."""

import uuid
from dataclasses import dataclass
from typing import Optional, Protocol, Union, runtime_checkable


DEFAULT_RANK = "default"

# Accepted forms of a player identifier
PlayerId = Union[uuid.UUID, str]


class StoreConfigurationError(Exception):
    """The store cannot be constructed (bad URL, unsupported backend, missing driver)."""

    pass


def normalize_player_id(player_id: PlayerId) -> str:
    """
    Return the canonical 36-character form of a player UUID.

    Raises ValueError if a string is not a valid UUID.
    """
    if isinstance(player_id, uuid.UUID):
        return str(player_id)
    return str(uuid.UUID(player_id))


@dataclass(frozen=True)
class PlayerRecord:
    """
    A player's account row.

    The uuid is the record's only identity. userid, when set, is unique
    across all records. other_data is opaque text owned by the caller.
    last_updated is the time of the last write in Unix epoch seconds.
    """

    uuid: str
    username: str
    userid: Optional[str] = None
    rank: Optional[str] = DEFAULT_RANK
    balance: float = 0.0
    other_data: Optional[str] = None
    last_updated: int = 0


@runtime_checkable
class PlayerRecordStore(Protocol):
    """
    Player record storage interface.

    Reads return sentinels instead of raising: a missing record and a
    failed query look the same to the caller.
    """

    def connect(self) -> bool:
        """Check that the database is reachable."""
        ...

    def create_table(self) -> bool:
        """Create the player_data table if it does not exist."""
        ...

    def get_balance(self, player_id: PlayerId) -> float:
        """Get the balance, or -1 if absent or on error."""
        ...

    def get_last_updated(self, player_id: PlayerId) -> int:
        """Get the last write time in epoch seconds, or 0 if absent or on error."""
        ...

    def set_balance(self, player_id: PlayerId, balance: float) -> None:
        """Insert or update only the balance of a record."""
        ...

    def update_player_data(
        self,
        player_id: PlayerId,
        username: str,
        userid: Optional[str],
        rank: Optional[str],
        balance: float,
        other_data: Optional[str],
    ) -> None:
        """Insert or overwrite every mutable column of a record."""
        ...

    def get_player_data(self, player_id: PlayerId) -> Optional[PlayerRecord]:
        """Get the full record, or None if absent or on error."""
        ...

    def disconnect(self) -> None:
        """Release the connection pool. Safe to call more than once."""
        ...
