"""SQLAlchemy implementation of PlayerRecordStore."""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import sqlalchemy as sa
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.exc import ArgumentError, NoSuchModuleError, ResourceClosedError, SQLAlchemyError
from sqlalchemy.pool import QueuePool, StaticPool

from . import schema
from .protocol import (
    PlayerId,
    PlayerRecord,
    StoreConfigurationError,
    normalize_player_id,
)
from .urls import resolve_url


logger = logging.getLogger(__name__)

MAX_POOL_SIZE = 15
STATEMENT_CACHE_SIZE = 250

# Seconds to wait for a free pooled connection (SQLAlchemy's default)
POOL_TIMEOUT_S = 30.0

MISSING_BALANCE = -1.0
MISSING_TIMESTAMP = 0


def _is_memory_database(url: URL) -> bool:
    return url.get_backend_name() == "sqlite" and url.database in (None, "", ":memory:")


class SQLPlayerRecordStore:
    """
    PlayerRecordStore over a pooled SQLAlchemy engine.

    Supports MySQL/MariaDB (production) and SQLite (local development).
    Every operation checks out one connection, runs one statement and
    returns the connection to the pool, including on error. Database
    errors are logged and turned into sentinel results.

    Usage:
        store = SQLPlayerRecordStore("jdbc:mysql://db:3306/game", "mc", "secret")
        store.set_balance(player_uuid, 100.0)
        store.disconnect()
    """

    # Used when no logger is passed to the constructor
    default_logger = logger

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        *,
        logger: Optional[logging.Logger] = None,
        pool_size: int = MAX_POOL_SIZE,
        statement_cache_size: int = STATEMENT_CACHE_SIZE,
        pool_timeout: float = POOL_TIMEOUT_S,
    ):
        self._logger = logger or self.default_logger
        self._closed = False

        self._engine = self._create_engine(
            url, username, password, pool_size, statement_cache_size, pool_timeout
        )
        self._dialect = self._engine.dialect.name

        self.create_table()

    def _create_engine(
        self,
        url: str,
        username: Optional[str],
        password: Optional[str],
        pool_size: int,
        statement_cache_size: int,
        pool_timeout: float,
    ) -> Engine:
        """Resolve the URL, load the driver and build the pooled engine."""
        try:
            resolved = resolve_url(url, username, password)
        except (ValueError, ArgumentError) as e:
            self._logger.error(f"Invalid database URL: {e}")
            raise StoreConfigurationError(f"Invalid database URL: {e}") from e

        backend = resolved.get_backend_name()
        try:
            schema.check_dialect(backend)
        except StoreConfigurationError as e:
            self._logger.error(str(e))
            raise

        if _is_memory_database(resolved):
            # Every connection must see the same in-memory database
            pool_options = {"poolclass": StaticPool}
        else:
            pool_options = {
                "poolclass": QueuePool,
                "pool_size": pool_size,
                "max_overflow": 0,
                "pool_timeout": pool_timeout,
                "pool_pre_ping": True,
            }
        if backend == "sqlite":
            # Pooled connections are handed between threads
            pool_options["connect_args"] = {"check_same_thread": False}

        try:
            engine = sa.create_engine(
                resolved,
                query_cache_size=statement_cache_size,
                **pool_options,
            )
        except (NoSuchModuleError, ImportError) as e:
            self._logger.error(f"Failed to load database driver for {resolved.drivername}: {e}")
            raise StoreConfigurationError(
                f"Database driver not available: {resolved.drivername}"
            ) from e

        self._logger.info(f"Database driver {engine.dialect.driver} loaded for {backend}.")
        return engine

    @property
    def closed(self) -> bool:
        return self._closed

    @contextmanager
    def _connection(self, write: bool = False) -> Iterator[Connection]:
        """Check out a pooled connection; writes commit on success."""
        if self._closed:
            raise ResourceClosedError("Player store has been disconnected")

        if write:
            with self._engine.begin() as conn:
                yield conn
        else:
            with self._engine.connect() as conn:
                yield conn

    def connect(self) -> bool:
        """Verify that a connection can be checked out and used."""
        try:
            with self._connection() as conn:
                conn.execute(sa.text("SELECT 1"))
        except SQLAlchemyError as e:
            self._logger.error(f"Error connecting to the database: {e}")
            return False

        self._logger.info("Successfully connected to the database.")
        return True

    def create_table(self) -> bool:
        """Create player_data if missing. Existing rows are left untouched."""
        try:
            with self._connection(write=True) as conn:
                conn.execute(schema.create_table_statement(self._dialect))
        except SQLAlchemyError as e:
            self._logger.error(f"Error creating table: {e}")
            return False
        return True

    # Reads

    def _fetch_balance(self, player_id: str) -> Optional[float]:
        with self._connection() as conn:
            value = conn.execute(schema.select_balance(player_id)).scalar_one_or_none()
        return None if value is None else float(value)

    def get_balance(self, player_id: PlayerId) -> float:
        """Get a player's balance; -1 if there is no record or the query fails."""
        player_id = normalize_player_id(player_id)
        try:
            balance = self._fetch_balance(player_id)
        except SQLAlchemyError as e:
            self._logger.error(f"Error fetching balance for {player_id}: {e}")
            return MISSING_BALANCE

        return MISSING_BALANCE if balance is None else balance

    def _fetch_last_updated(self, player_id: str) -> Optional[int]:
        with self._connection() as conn:
            value = conn.execute(
                schema.select_last_updated(self._dialect, player_id)
            ).scalar_one_or_none()
        return None if value is None else int(value)

    def get_last_updated(self, player_id: PlayerId) -> int:
        """Get the last write time in epoch seconds; 0 if absent or on error."""
        player_id = normalize_player_id(player_id)
        try:
            last_updated = self._fetch_last_updated(player_id)
        except SQLAlchemyError as e:
            self._logger.error(f"Error fetching last updated time for {player_id}: {e}")
            return MISSING_TIMESTAMP

        return MISSING_TIMESTAMP if last_updated is None else last_updated

    def _fetch_player(self, player_id: str) -> Optional[PlayerRecord]:
        with self._connection() as conn:
            row = conn.execute(
                schema.select_player(self._dialect, player_id)
            ).mappings().first()

        if row is None:
            return None

        return PlayerRecord(
            uuid=row["uuid"],
            username=row["username"],
            userid=row["userid"],
            rank=row["rank"],
            balance=float(row["balance"]),
            other_data=row["other_data"],
            last_updated=int(row["last_updated"] or MISSING_TIMESTAMP),
        )

    def get_player_data(self, player_id: PlayerId) -> Optional[PlayerRecord]:
        """Get a player's full record; None if absent or on error."""
        player_id = normalize_player_id(player_id)
        try:
            return self._fetch_player(player_id)
        except SQLAlchemyError as e:
            self._logger.error(f"Error fetching player data for {player_id}: {e}")
            return None

    # Writes

    def set_balance(self, player_id: PlayerId, balance: float) -> None:
        """
        Set a player's balance, creating the record if needed.

        A new record gets schema defaults for everything except the
        balance. Failures are logged only.
        """
        player_id = normalize_player_id(player_id)
        try:
            with self._connection(write=True) as conn:
                conn.execute(schema.upsert_balance(self._dialect, player_id, balance))
        except SQLAlchemyError as e:
            self._logger.error(f"Error setting balance for {player_id}: {e}")

    def update_player_data(
        self,
        player_id: PlayerId,
        username: str,
        userid: Optional[str],
        rank: Optional[str],
        balance: float,
        other_data: Optional[str],
    ) -> None:
        """
        Write every mutable column of a player's record.

        An existing record is overwritten in full (last write wins).
        Failures, including a userid already owned by another record,
        are logged only.
        """
        player_id = normalize_player_id(player_id)
        stmt = schema.upsert_player(
            self._dialect, player_id, username, userid, rank, balance, other_data
        )
        try:
            with self._connection(write=True) as conn:
                conn.execute(stmt)
        except SQLAlchemyError as e:
            self._logger.error(f"Error updating player data for {player_id}: {e}")

    # Lifecycle

    def disconnect(self) -> None:
        """Dispose of the connection pool. Later calls do nothing."""
        if self._closed:
            return

        self._engine.dispose()
        self._closed = True
        self._logger.info("Disconnected from DB")

    def __enter__(self) -> "SQLPlayerRecordStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.disconnect()
