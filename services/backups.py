"""Backup and restore of transactions as a JSON array."""

import json
from pathlib import Path
from typing import List

from errors import MalformedPayloadError, ValidationError
from logger import get_logger
from models.transaction import Transaction

logger = get_logger()


class BackupService:
    """Service for JSON backup, restore and device-to-device transfer."""

    def __init__(self, transactions):
        """Initialize the backup service.

        Args:
            transactions: TransactionService whose records are backed up.
        """
        self.transactions = transactions

    def export_json(self, indent=2) -> str:
        """Serialize all transactions as a JSON array.

        Args:
            indent: JSON indentation, None for compact text transfer.
        """
        return json.dumps(
            [t.to_dict() for t in self.transactions.all()],
            ensure_ascii=False,
            indent=indent,
        )

    def parse(self, text: str) -> List[Transaction]:
        """Parse and validate backup text without touching the store.

        Use the returned list's length to confirm an import before calling
        restore().

        Raises:
            MalformedPayloadError: If the text is not valid JSON.
            ValidationError: If the JSON is not an array, or any record lacks a
                date, amount or type.
        """
        if not text or not text.strip():
            raise MalformedPayloadError("Backup text is empty")

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedPayloadError(f"Backup is not valid JSON: {e}") from e

        if not isinstance(payload, list):
            raise ValidationError("Backup must be a JSON array of transactions")

        parsed = []
        for index, record in enumerate(payload):
            try:
                parsed.append(Transaction.from_dict(record))
            except ValidationError as e:
                raise ValidationError(f"Record {index}: {e}", index=index) from e
        return parsed

    def restore(self, text: str) -> int:
        """Replace all transactions with the ones in the backup text.

        Returns:
            Number of transactions restored.

        Raises:
            MalformedPayloadError: If the text is not valid JSON.
            ValidationError: If any record is invalid. The store is unchanged.
        """
        parsed = self.parse(text)
        count = self.transactions.replace_all(parsed)
        logger.info(f"Restored {count} transaction(s) from backup")
        return count

    def write_backup(self, path: Path) -> int:
        """Write all transactions to a JSON backup file.

        Returns:
            Number of transactions written.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.export_json(), encoding="utf-8")
        count = self.transactions.count()
        logger.info(f"Wrote {count} transaction(s) to {path}")
        return count

    def read_backup(self, path: Path) -> List[Transaction]:
        """Read and validate a backup file without touching the store."""
        return self.parse(Path(path).read_text(encoding="utf-8-sig"))
