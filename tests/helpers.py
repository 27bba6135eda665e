"""Helper utilities for tests."""

from datetime import date
from decimal import Decimal
from contextlib import contextmanager
from pathlib import Path
import sqlite3
import threading
import time

from config import get_migrations_dir
from llm.providers.base import LLMProvider
from models.category import Category, TransactionType
from models.transaction import Transaction


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    migration_files = sorted(migrations_dir.glob("*.sql"))

    for migration_file in migration_files:
        with open(migration_file, "r", encoding="utf-8") as f:
            sql = f.read()

        conn.executescript(sql)

    conn.commit()


def make_transaction(
    day: str,
    amount,
    type: TransactionType = TransactionType.EXPENSE,
    category: Category = Category.FOOD,
    description: str = "test",
) -> Transaction:
    """Build a transaction from an ISO date string and a plain number."""
    return Transaction.create(
        date=date.fromisoformat(day),
        amount=Decimal(str(amount)),
        type=type,
        category=category,
        description=description,
    )


class MemoryPersistence:
    """Persistence collaborator that keeps snapshots in memory."""

    def __init__(self, entries=None, budget=None, fail_saves=False):
        self.entries = entries
        self.budget = budget
        self.save_count = 0
        self.fail_saves = fail_saves

    def load_entries(self):
        return None if self.entries is None else list(self.entries)

    def save_entries(self, records):
        if self.fail_saves:
            raise OSError("disk full")
        self.entries = list(records)
        self.save_count += 1

    def load_budget(self):
        return self.budget

    def save_budget(self, amount):
        self.budget = amount


class StubProvider(LLMProvider):
    """LLM provider returning canned results per fragment.

    Args:
        responses: Mapping of fragment to a result dict or an exception to raise.
        delays: Optional mapping of fragment to seconds to sleep before answering.
    """

    def __init__(self, responses, delays=None):
        self.responses = responses
        self.delays = delays or {}
        self.calls = []
        self._lock = threading.Lock()

    def parse_fragment(self, fragment):
        with self._lock:
            self.calls.append(fragment)
        time.sleep(self.delays.get(fragment, 0))
        response = self.responses[fragment]
        if isinstance(response, Exception):
            raise response
        return response


class InMemoryDatabaseManager:
    """Database manager that hands out one shared in-memory connection.

    The connection is never closed here; the test_db fixture owns it.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    @contextmanager
    def connect(self):
        yield self.conn

    def get_db_path(self):
        return Path(":memory:")

    def get_migrations_dir(self):
        return get_migrations_dir()
