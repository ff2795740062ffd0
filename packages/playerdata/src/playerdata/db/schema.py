"""
player_data table definition and dialect-specific SQL.

The CREATE TABLE statement is kept as literal text so MySQL deployments get
exactly the same table as the existing game servers. DML is built with
SQLAlchemy Core against the Table below so parameter binding and identifier
quoting (``rank`` is reserved on newer MySQL) follow the connected dialect.
"""

from typing import Optional

import sqlalchemy as sa
from sqlalchemy.dialects import mysql, sqlite

from .protocol import StoreConfigurationError


MYSQL_DIALECTS = ("mysql", "mariadb")
SUPPORTED_DIALECTS = MYSQL_DIALECTS + ("sqlite",)

CREATE_TABLE_SQL = (
    "CREATE TABLE IF NOT EXISTS player_data ("
    "uuid VARCHAR(36) PRIMARY KEY, "
    "username VARCHAR(16) NOT NULL, "
    "userid VARCHAR(36) UNIQUE, "
    "rank VARCHAR(50) DEFAULT 'default', "
    "balance DOUBLE NOT NULL DEFAULT 0.0, "
    "other_data TEXT, "
    "last_updated TIMESTAMP DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP)"
)

# SQLite has no ON UPDATE clause; upserts set last_updated themselves
SQLITE_CREATE_TABLE_SQL = CREATE_TABLE_SQL.replace(" ON UPDATE CURRENT_TIMESTAMP", "")

# MySQL fills a NOT NULL VARCHAR without a default with '' outside strict mode
IMPLICIT_USERNAME = ""

metadata = sa.MetaData()

player_data = sa.Table(
    "player_data",
    metadata,
    sa.Column("uuid", sa.String(36), primary_key=True),
    sa.Column("username", sa.String(16), nullable=False),
    sa.Column("userid", sa.String(36), unique=True),
    sa.Column("rank", sa.String(50), server_default="default"),
    sa.Column("balance", sa.Double(), nullable=False, server_default="0.0"),
    sa.Column("other_data", sa.Text()),
    sa.Column("last_updated", sa.TIMESTAMP(), server_default=sa.func.current_timestamp()),
)


def check_dialect(dialect_name: str) -> None:
    """Raise StoreConfigurationError unless the backend is supported."""
    if dialect_name not in SUPPORTED_DIALECTS:
        raise StoreConfigurationError(
            f"Unsupported database backend '{dialect_name}' "
            f"(expected one of: {', '.join(SUPPORTED_DIALECTS)})"
        )


def create_table_statement(dialect_name: str) -> sa.TextClause:
    if dialect_name == "sqlite":
        return sa.text(SQLITE_CREATE_TABLE_SQL)
    return sa.text(CREATE_TABLE_SQL)


def last_updated_epoch(dialect_name: str) -> sa.ColumnElement:
    """Expression for last_updated as Unix epoch seconds."""
    column = player_data.c.last_updated
    if dialect_name == "sqlite":
        return sa.cast(sa.func.strftime("%s", column), sa.Integer)
    return sa.func.unix_timestamp(column)


def select_balance(player_id: str) -> sa.Select:
    return sa.select(player_data.c.balance).where(player_data.c.uuid == player_id)


def select_last_updated(dialect_name: str, player_id: str) -> sa.Select:
    return sa.select(last_updated_epoch(dialect_name)).where(
        player_data.c.uuid == player_id
    )


def select_player(dialect_name: str, player_id: str) -> sa.Select:
    return sa.select(
        player_data.c.uuid,
        player_data.c.username,
        player_data.c.userid,
        player_data.c.rank,
        player_data.c.balance,
        player_data.c.other_data,
        last_updated_epoch(dialect_name).label("last_updated"),
    ).where(player_data.c.uuid == player_id)


def _upsert(dialect_name: str, values: dict, update_columns: list):
    """
    Build INSERT ... ON DUPLICATE KEY UPDATE (MySQL) or
    INSERT ... ON CONFLICT(uuid) DO UPDATE (SQLite).

    Conflicting rows take the inserted value for each of update_columns
    and get a fresh last_updated.
    """
    if dialect_name == "sqlite":
        stmt = sqlite.insert(player_data).values(**values)
        updates = {name: stmt.excluded[name] for name in update_columns}
        updates["last_updated"] = sa.func.current_timestamp()
        return stmt.on_conflict_do_update(
            index_elements=[player_data.c.uuid],
            set_=updates,
        )

    stmt = mysql.insert(player_data).values(**values)
    updates = {name: stmt.inserted[name] for name in update_columns}
    updates["last_updated"] = sa.func.current_timestamp()
    return stmt.on_duplicate_key_update(updates)


def upsert_balance(dialect_name: str, player_id: str, balance: float):
    return _upsert(
        dialect_name,
        {"uuid": player_id, "username": IMPLICIT_USERNAME, "balance": balance},
        ["balance"],
    )


def upsert_player(
    dialect_name: str,
    player_id: str,
    username: str,
    userid: Optional[str],
    rank: Optional[str],
    balance: float,
    other_data: Optional[str],
):
    return _upsert(
        dialect_name,
        {
            "uuid": player_id,
            "username": username,
            "userid": userid,
            "rank": rank,
            "balance": balance,
            "other_data": other_data,
        },
        ["username", "userid", "rank", "balance", "other_data"],
    )
