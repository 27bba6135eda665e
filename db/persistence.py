"""SQLite-backed load/save of the transaction list and the monthly budget."""

import json
from decimal import Decimal
from typing import List, Optional

# Settings keys
_ENTRIES_SAVED_KEY = "entries_saved"
_BUDGET_KEY = "monthly_budget"


class SQLitePersistence:
    """Persists whole snapshots of the store.

    The store is always written in full: saving replaces every stored record.
    Records are kept as JSON payloads, in the order given.
    """

    def __init__(self, db_manager):
        """Initialize persistence.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def load_entries(self) -> Optional[List[dict]]:
        """Load every stored record.

        Returns:
            List of raw record dictionaries, or None if entries were never
            saved (first run).
        """
        with self.db_manager.connect() as conn:
            if self._get_setting(conn, _ENTRIES_SAVED_KEY) is None:
                return None

            cursor = conn.execute("SELECT payload FROM entries ORDER BY position")
            return [json.loads(row[0]) for row in cursor.fetchall()]

    def save_entries(self, records: List[dict]) -> None:
        """Replace all stored records with the given ones.

        Args:
            records: Record dictionaries in display order.
        """
        with self.db_manager.connect() as conn:
            try:
                conn.execute("DELETE FROM entries")
                conn.executemany(
                    "INSERT INTO entries (position, id, payload) VALUES (?, ?, ?)",
                    [
                        (position, str(record.get("id", "")), json.dumps(record, ensure_ascii=False))
                        for position, record in enumerate(records)
                    ],
                )
                self._set_setting(conn, _ENTRIES_SAVED_KEY, "1")
                conn.commit()
            except Exception:
                conn.rollback()
                raise

    def load_budget(self) -> Optional[Decimal]:
        """Load the monthly budget.

        Returns:
            The stored budget, or None if it was never set.
        """
        with self.db_manager.connect() as conn:
            value = self._get_setting(conn, _BUDGET_KEY)
            return Decimal(value) if value is not None else None

    def save_budget(self, amount: Decimal) -> None:
        """Store the monthly budget."""
        with self.db_manager.connect() as conn:
            self._set_setting(conn, _BUDGET_KEY, str(amount))
            conn.commit()

    def _get_setting(self, conn, key: str) -> Optional[str]:
        cursor = conn.execute("SELECT value FROM settings WHERE key = ?", (key,))
        row = cursor.fetchone()
        return row[0] if row else None

    def _set_setting(self, conn, key: str, value: str) -> None:
        conn.execute(
            "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
            (key, value),
        )
