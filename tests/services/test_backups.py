import json

import pytest

from errors import MalformedPayloadError, ValidationError
from models.category import Category, TransactionType
from services.backups import BackupService
from services.transactions import TransactionService
from tests.helpers import MemoryPersistence, make_transaction


@pytest.fixture
def store():
    store = TransactionService(MemoryPersistence())
    store.add(
        [
            make_transaction("2024-05-02", 45000, TransactionType.EXPENSE, Category.HANG_OUT, "cafe"),
            make_transaction("2024-05-01", 10000000, TransactionType.INCOME, Category.INCOME, "lương"),
        ]
    )
    return store


class TestBackupService:
    """Tests for BackupService."""

    def test_export_json(self, store):
        """Test the backup is a JSON array of records with readable text."""
        text = BackupService(store).export_json()

        payload = json.loads(text)
        assert [r["description"] for r in payload] == ["cafe", "lương"]
        assert payload[0]["category"] == "Đi chơi & Giải trí"
        assert "lương" in text

    def test_export_then_restore_preserves_records(self, store):
        backups = BackupService(store)
        text = backups.export_json()
        original = store.all()
        store.clear()

        count = backups.restore(text)

        assert count == 2
        assert store.all() == original

    def test_parse_does_not_touch_store(self, store):
        backups = BackupService(store)
        before = store.all()

        parsed = backups.parse('[{"date": "2024-06-01", "amount": 5, "type": "saving"}]')

        assert len(parsed) == 1
        assert store.all() == before

    @pytest.mark.parametrize("text", ["", "   ", "{not json", "[1, 2"])
    def test_malformed_text(self, store, text):
        before = store.all()

        with pytest.raises(MalformedPayloadError):
            BackupService(store).restore(text)

        assert store.all() == before

    def test_non_array_rejected(self, store):
        with pytest.raises(ValidationError):
            BackupService(store).restore('{"date": "2024-06-01"}')

    def test_invalid_record_leaves_store_unchanged(self, store):
        """Test one record without a date rejects the whole restore."""
        before = store.all()
        text = json.dumps(
            [
                {"date": "2024-06-01", "amount": 5, "type": "expense"},
                {"amount": 5, "type": "expense"},
            ]
        )

        with pytest.raises(ValidationError) as exc_info:
            BackupService(store).restore(text)

        assert exc_info.value.index == 1
        assert store.all() == before

    def test_write_and_read_backup_file(self, store, tmp_path):
        backups = BackupService(store)
        path = tmp_path / "nested" / "backup.json"

        assert backups.write_backup(path) == 2
        assert [t.description for t in backups.read_backup(path)] == ["cafe", "lương"]

    def test_read_backup_with_bom(self, store, tmp_path):
        path = tmp_path / "backup.json"
        path.write_text(
            "\ufeff" + '[{"date": "2024-06-01", "amount": 5, "type": "expense"}]',
            encoding="utf-8",
        )

        assert len(BackupService(store).read_backup(path)) == 1
