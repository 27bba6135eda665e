"""SQLite connection handling and schema migrations."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import List, Set

from config import Config, get_migrations_dir
from logger import get_logger

logger = get_logger()


class DatabaseManager:
    """Opens connections to the spendnote database and keeps its schema current.

    Args:
        config: Application configuration object.
    """

    def __init__(self, config: Config):
        self.config = config

    @contextmanager
    def connect(self):
        """Get a database connection with automatic cleanup.

        Yields:
            sqlite3.Connection: Database connection.
        """
        db_path = self.config.db_path
        db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(db_path)
        try:
            yield conn
        finally:
            conn.close()

    def get_db_path(self) -> Path:
        return self.config.db_path

    def get_migrations_dir(self) -> Path:
        return get_migrations_dir()

    def available_migrations(self) -> List[str]:
        """Migration file names in the order they must be applied."""
        migrations_dir = self.get_migrations_dir()
        if not migrations_dir.exists():
            return []
        return sorted(p.name for p in migrations_dir.glob("*.sql"))

    def applied_migrations(self) -> Set[str]:
        with self.connect() as conn:
            _init_schema_migrations_table(conn)
            cursor = conn.execute("SELECT migration_file FROM schema_migrations")
            return {row[0] for row in cursor.fetchall()}

    def pending_migrations(self) -> List[str]:
        applied = self.applied_migrations()
        return [m for m in self.available_migrations() if m not in applied]

    def apply_pending_migrations(self) -> List[str]:
        """Apply every migration not yet recorded as applied.

        Returns:
            Names of the migrations that were applied.

        Raises:
            sqlite3.Error: If a migration fails. That migration is rolled back.
        """
        pending = self.pending_migrations()
        if not pending:
            return []

        with self.connect() as conn:
            for migration_file in pending:
                _apply_migration(conn, self.get_migrations_dir() / migration_file)
        return pending


def _init_schema_migrations_table(conn) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schema_migrations (
            migration_file TEXT PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.commit()


def _apply_migration(conn, migration_path: Path) -> None:
    with open(migration_path, "r", encoding="utf-8") as f:
        sql = f.read()

    try:
        conn.executescript(sql)
        conn.execute(
            "INSERT INTO schema_migrations (migration_file) VALUES (?)",
            (migration_path.name,),
        )
        conn.commit()
        logger.info(f"Applied migration: {migration_path.name}")
    except Exception as e:
        conn.rollback()
        logger.error(f"Error applying migration {migration_path.name}: {e}")
        raise
