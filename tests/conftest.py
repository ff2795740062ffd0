"""
Pytest fixtures for player store tests.

Each test gets its own file-backed SQLite database under tmp_path.
"""

import logging
import uuid
from pathlib import Path
from typing import Generator

import pytest
import sqlalchemy as sa

from playerdata.db import SQLPlayerRecordStore


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path of the test database file."""
    return tmp_path / "players.db"


@pytest.fixture
def db_url(db_path: Path) -> str:
    """SQLAlchemy URL of the test database."""
    return f"sqlite:///{db_path}"


@pytest.fixture
def store_logger() -> logging.Logger:
    """Logger handed to the store so tests can capture its output."""
    return logging.getLogger("tests.playerdata.store")


@pytest.fixture
def store(db_url, store_logger) -> Generator[SQLPlayerRecordStore, None, None]:
    """A connected store, disconnected after the test."""
    player_store = SQLPlayerRecordStore(db_url, logger=store_logger)
    yield player_store
    player_store.disconnect()


@pytest.fixture
def raw_engine(db_url) -> Generator[sa.Engine, None, None]:
    """A second engine on the same database for inspecting rows directly."""
    engine = sa.create_engine(db_url)
    yield engine
    engine.dispose()


@pytest.fixture
def player_id() -> uuid.UUID:
    return uuid.uuid4()
