"""Tests for the database lifecycle."""

import pytest

from nexus_flow.storage.database import Database, init_database


async def test_connect_and_close(db_url):
    """Test the connection state across connect and close."""
    database = Database(db_url)
    assert not database.is_connected
    with pytest.raises(RuntimeError):
        database.session()

    await database.connect()
    assert database.is_connected
    assert await database.check_connection()

    await database.close()
    assert not database.is_connected


async def test_connect_twice_keeps_engine(db_url):
    """Test that a second connect reuses the existing engine."""
    database = await init_database(db_url)
    engine = database.engine

    await database.connect()

    assert database.engine is engine
    await database.close()


async def test_creates_parent_directory(tmp_path):
    """Test that the SQLite file's directory is created on connect."""
    database = await init_database(f"sqlite+aiosqlite:///{tmp_path / 'nested' / 'app.db'}")

    assert (tmp_path / "nested").is_dir()
    await database.close()
