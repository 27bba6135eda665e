"""Transaction store service."""

import calendar
from datetime import date
from typing import Iterable, List, Optional

from errors import ValidationError
from logger import get_logger
from models.category import is_consistent
from models.transaction import Transaction, check_amount, migrate_record

logger = get_logger()


class TransactionService:
    """Owns the in-memory list of transactions.

    Every mutation writes the full list back through the persistence
    collaborator; the in-memory list changes only once that write succeeds.
    Query methods always sort explicitly; the container order
    (newest batch first) is a display convention only.
    """

    def __init__(self, persistence):
        """Initialize the transaction service.

        Args:
            persistence: Object providing load_entries() and save_entries().
        """
        self.persistence = persistence
        self._entries: List[Transaction] = []

    def load(self) -> int:
        """Load transactions from persistence, upgrading legacy records.

        Returns:
            Number of transactions loaded.
        """
        records = self.persistence.load_entries()
        if records is None:
            logger.debug("No saved transactions found, starting empty")
            self._entries = []
            return 0

        loaded = []
        for position, record in enumerate(records):
            try:
                loaded.append(Transaction.from_dict(migrate_record(record)))
            except ValidationError as e:
                raise ValidationError(
                    f"Stored record {position} is invalid: {e}", index=position
                ) from e

        self._entries = loaded
        logger.debug(f"Loaded {len(loaded)} transaction(s)")
        return len(loaded)

    def all(self) -> List[Transaction]:
        """Get a copy of every transaction."""
        return list(self._entries)

    def count(self) -> int:
        return len(self._entries)

    def find(self, transaction_id: str) -> Optional[Transaction]:
        """Get a single transaction by ID.

        Args:
            transaction_id: The transaction ID.

        Returns:
            Transaction object if found, None otherwise.
        """
        for transaction in self._entries:
            if transaction.id == transaction_id:
                return transaction
        return None

    def add(self, batch: Iterable[Transaction]) -> List[Transaction]:
        """Add a batch of transactions ahead of the existing ones.

        Duplicate IDs are not checked for.

        Args:
            batch: Transactions in submission order.

        Returns:
            The added transactions.

        Raises:
            ValidationError: If any amount is out of range or any transaction
                pairs a category with a type it contradicts. Nothing is added
                in that case.
        """
        batch = list(batch)
        for index, transaction in enumerate(batch):
            _check_amount(transaction, index)
            if not is_consistent(transaction.type, transaction.category):
                raise ValidationError(
                    f"Category '{transaction.category.value}' cannot be used "
                    f"with type '{transaction.type.value}'",
                    index=index,
                )

        if not batch:
            return []

        self._commit(batch + self._entries)
        logger.info(f"Added {len(batch)} transaction(s)")
        return batch

    def remove(self, transaction_id: str) -> bool:
        """Delete one transaction by ID.

        Returns:
            True if a transaction was deleted, False if the ID was not found.
        """
        remaining = [t for t in self._entries if t.id != transaction_id]
        if len(remaining) == len(self._entries):
            return False

        self._commit(remaining)
        logger.info(f"Deleted transaction {transaction_id}")
        return True

    def clear(self) -> int:
        """Delete every transaction.

        Returns:
            Number of transactions deleted.
        """
        count = len(self._entries)
        self._commit([])
        logger.info(f"Cleared {count} transaction(s)")
        return count

    def replace_all(self, records: Iterable) -> int:
        """Replace the whole store with imported records.

        Each record may be a Transaction or a dictionary in the interchange
        shape. Dictionaries must carry a non-empty date, amount and type.

        Args:
            records: List or tuple of records to import.

        Returns:
            Number of transactions now in the store.

        Raises:
            ValidationError: If the payload is not a list or any record is
                invalid. The store is unchanged.
        """
        if not isinstance(records, (list, tuple)):
            raise ValidationError("Import payload must be a list of transactions")

        parsed = []
        for index, record in enumerate(records):
            if isinstance(record, Transaction):
                _check_amount(record, index)
                parsed.append(record)
                continue
            try:
                parsed.append(Transaction.from_dict(record))
            except ValidationError as e:
                raise ValidationError(f"Record {index}: {e}", index=index) from e

        self._commit(parsed)
        logger.info(f"Replaced store with {len(parsed)} transaction(s)")
        return len(parsed)

    def find_by_date_range(self, start: date, end: date) -> List[Transaction]:
        """Get transactions within a date range.

        Args:
            start: Start date (inclusive).
            end: End date (inclusive).

        Returns:
            List of Transaction objects ordered by date (oldest first).
        """
        selected = [t for t in self._entries if start <= t.date <= end]
        return sorted(selected, key=lambda t: t.date)

    def find_by_month(self, year: int, month: int) -> List[Transaction]:
        """Get transactions for a specific month, for the history list.

        Args:
            year: Year (e.g., 2025).
            month: Month (1-12).

        Returns:
            List of Transaction objects ordered by date (newest first).
        """
        last_day = calendar.monthrange(year, month)[1]
        selected = self.find_by_date_range(
            date(year, month, 1), date(year, month, last_day)
        )
        return sorted(selected, key=lambda t: t.date, reverse=True)

    def _commit(self, entries: List[Transaction]) -> None:
        """Persist ``entries`` and only then make them the store's contents."""
        self.persistence.save_entries([t.to_dict() for t in entries])
        self._entries = entries


def _check_amount(transaction: Transaction, index: int) -> None:
    try:
        check_amount(transaction.amount)
    except ValidationError as e:
        raise ValidationError(f"Record {index}: {e}", index=index) from e
