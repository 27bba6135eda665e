import sqlite3
from decimal import Decimal

from db.manager import DatabaseManager
from db.persistence import SQLitePersistence


class TestSQLitePersistence:
    """Tests for SQLitePersistence."""

    def test_load_entries_before_first_save(self, db_manager_with_schema):
        """Test a fresh database reports that nothing was ever saved."""
        persistence = SQLitePersistence(db_manager_with_schema)

        assert persistence.load_entries() is None

    def test_save_and_load_entries(self, db_manager_with_schema):
        persistence = SQLitePersistence(db_manager_with_schema)
        records = [
            {"id": "b", "date": "2024-05-02", "amount": 2, "type": "expense"},
            {"id": "a", "date": "2024-05-01", "amount": 1, "category": "Thu nhập"},
        ]

        persistence.save_entries(records)

        assert persistence.load_entries() == records

    def test_save_replaces_previous_entries(self, db_manager_with_schema):
        persistence = SQLitePersistence(db_manager_with_schema)
        persistence.save_entries([{"id": "a"}, {"id": "b"}])

        persistence.save_entries([{"id": "c"}])

        assert persistence.load_entries() == [{"id": "c"}]

    def test_saved_empty_list_is_not_first_run(self, db_manager_with_schema):
        persistence = SQLitePersistence(db_manager_with_schema)

        persistence.save_entries([])

        assert persistence.load_entries() == []

    def test_unicode_payload(self, db_manager_with_schema):
        persistence = SQLitePersistence(db_manager_with_schema)
        records = [{"id": "a", "description": "ăn phố", "category": "Đi chơi & Giải trí"}]

        persistence.save_entries(records)

        assert persistence.load_entries() == records

    def test_budget(self, db_manager_with_schema):
        persistence = SQLitePersistence(db_manager_with_schema)

        assert persistence.load_budget() is None

        persistence.save_budget(Decimal("1500000"))
        persistence.save_budget(Decimal("2000000"))

        assert persistence.load_budget() == Decimal("2000000")


class TestDatabaseManager:
    """Tests for DatabaseManager against a database file."""

    def test_apply_pending_migrations(self, test_config):
        db_manager = DatabaseManager(test_config)

        applied = db_manager.apply_pending_migrations()

        assert applied == db_manager.available_migrations()
        assert "001_initial.sql" in applied
        assert test_config.db_path.exists()
        assert db_manager.pending_migrations() == []

    def test_apply_twice_is_noop(self, test_config):
        db_manager = DatabaseManager(test_config)
        db_manager.apply_pending_migrations()

        assert db_manager.apply_pending_migrations() == []

    def test_schema_created(self, test_config):
        db_manager = DatabaseManager(test_config)
        db_manager.apply_pending_migrations()

        conn = sqlite3.connect(test_config.db_path)
        try:
            tables = {
                row[0]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
        finally:
            conn.close()

        assert {"entries", "settings", "schema_migrations"} <= tables

    def test_persistence_over_file(self, test_config):
        """Test snapshots survive across connections to the same file."""
        db_manager = DatabaseManager(test_config)
        db_manager.apply_pending_migrations()
        SQLitePersistence(db_manager).save_entries([{"id": "a"}])

        assert SQLitePersistence(DatabaseManager(test_config)).load_entries() == [{"id": "a"}]
