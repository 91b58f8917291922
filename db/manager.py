"""Database manager for SQLite connections and path management."""

import sqlite3
from contextlib import contextmanager
from config import Config, get_migrations_dir


class DatabaseManager:
    """Manages database connections and paths.

    Args:
        config: Application configuration object.
    """

    # Seconds a writer waits on a locked database before giving up. Pattern
    # upserts from concurrent learning events queue on this lock.
    BUSY_TIMEOUT = 10.0

    def __init__(self, config: Config):
        """Initialize the database manager.

        Args:
            config: Config object containing database configuration.
        """
        self.config = config

    @contextmanager
    def connect(self):
        """Get a database connection with automatic cleanup.

        Foreign keys are enabled so that deleting a category removes its
        learned patterns.

        Yields:
            sqlite3.Connection: Database connection.
        """
        db_path = self.config.db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path, timeout=self.BUSY_TIMEOUT)
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
        finally:
            conn.close()

    def get_db_path(self):
        """Get the current database path.

        Returns:
            Path: Path to the database file.
        """
        return self.config.db_path

    def get_migrations_dir(self):
        """Get the migrations directory path.

        Returns:
            Path: Path to the migrations directory.
        """
        return get_migrations_dir()
