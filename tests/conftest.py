"""Shared pytest fixtures for all tests."""

import sqlite3
import pytest

from config import Config, get_migrations_dir
from services.base import Services
from tests.helpers import InMemoryDatabaseManager, run_migrations


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Yields:
        sqlite3.Connection: Connection to in-memory database.
    """
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary directory.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "spendnote",
        db_data_dir=tmp_path / "spendnote" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "spendnote" / "logs",
        export_dir=tmp_path / "spendnote" / "exports",
        llm_enabled=False,
        llm_provider="openai",
        llm_openai_api_key="",
        llm_openai_model="gpt-4o-mini",
    )


@pytest.fixture
def db_manager_with_schema(test_db):
    """Database manager over the in-memory database with all migrations applied."""
    run_migrations(test_db, get_migrations_dir())
    return InMemoryDatabaseManager(test_db)


@pytest.fixture
def services(test_config, db_manager_with_schema):
    """Create a loaded Services container with test database.

    Args:
        test_config: Test configuration fixture.
        db_manager_with_schema: Database manager with schema set up.

    Returns:
        Services: Services container for testing.
    """
    return Services(test_config, db_manager=db_manager_with_schema).load()
