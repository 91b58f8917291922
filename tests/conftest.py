"""Shared pytest fixtures for all tests."""

import sqlite3
import pytest
from decimal import Decimal
from pathlib import Path

from config import Config, get_migrations_dir
from cli.migrate import apply_pending_migrations
from services.base import Services
from tests.helpers import StubLLMProvider


@pytest.fixture
def test_db():
    """Create an in-memory SQLite database for testing.

    Yields:
        sqlite3.Connection: Connection to in-memory database.
    """
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys = ON")
    yield conn
    conn.close()


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration pointing to a temporary database.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.

    Returns:
        Config: Test configuration object.
    """
    return Config(
        base_dir=tmp_path / "spendwise",
        db_data_dir=tmp_path / "spendwise" / "db",
        db_filename="test.db",
        log_level="DEBUG",
        log_dir=tmp_path / "spendwise" / "logs",
        llm_enabled=False,
        llm_provider="openai",
        llm_openai_api_key="",
        llm_openai_model="gpt-4o-mini",
    )


@pytest.fixture
def db_manager_with_schema(test_db):
    """Create a DatabaseManager with schema already set up.

    This fixture provides a DatabaseManager that uses an in-memory database
    with all migrations already applied.

    Args:
        test_db: In-memory database connection fixture.

    Returns:
        DatabaseManager: Database manager with schema ready.
    """
    apply_pending_migrations(test_db, get_migrations_dir())

    class TestDatabaseManager:
        """Test database manager that uses in-memory connection."""

        def __init__(self, conn):
            self.conn = conn

        def connect(self):
            """Return a context manager for the test connection."""
            return _TestConnectionContext(self.conn)

        def get_db_path(self):
            """Return a fake path for the test database."""
            return Path(":memory:")

        def get_migrations_dir(self):
            """Get the migrations directory path."""
            return get_migrations_dir()

    class _TestConnectionContext:
        """Context manager for test database connections."""

        def __init__(self, conn):
            self.conn = conn

        def __enter__(self):
            return self.conn

        def __exit__(self, exc_type, exc_val, exc_tb):
            # Don't close the connection - let the fixture handle it
            pass

    return TestDatabaseManager(test_db)


@pytest.fixture
def llm_provider():
    """Stub LLM provider answering "Transfer"."""
    return StubLLMProvider()


@pytest.fixture
def services(test_config, db_manager_with_schema, llm_provider):
    """Create a Services container with test database and stub LLM.

    Args:
        test_config: Test configuration fixture.
        db_manager_with_schema: Database manager with schema set up.
        llm_provider: Stub LLM provider fixture.

    Returns:
        Services: Services container for testing.
    """
    return Services(
        test_config, db_manager=db_manager_with_schema, llm_provider=llm_provider
    )


@pytest.fixture
def make_transaction():
    """Factory for transactions with a checksum ID over their fields."""
    from models.transaction import Transaction

    def _make(
        beneficiary_name=None,
        remark=None,
        amount=Decimal("0"),
        beneficiary_account=None,
        user_id="alice",
    ):
        return Transaction.create_with_checksum(
            raw_data=f"{beneficiary_name}|{beneficiary_account}|{remark}|{amount}",
            user_id=user_id,
            amount=Decimal(str(amount)),
            beneficiary_name=beneficiary_name,
            beneficiary_account=beneficiary_account,
            remark=remark,
        )

    return _make
