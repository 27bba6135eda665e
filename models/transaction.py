from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation, getcontext
from typing import Optional
import re
import uuid

from errors import ValidationError
from models.category import Category, TransactionType

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Category literal used by the pre-"type" schema to mark income
LEGACY_INCOME_CATEGORY = Category.INCOME.value


@dataclass
class Transaction:
    id: str  # uuid4 hex, never reused
    date: date
    amount: Decimal  # always positive, direction comes from type
    type: TransactionType
    category: Category
    description: str
    original_text: Optional[str] = None  # raw fragment that produced the record

    @classmethod
    def create(
        cls,
        date: date,
        amount: Decimal,
        type: TransactionType,
        category: Category,
        description: str,
        original_text: Optional[str] = None,
    ) -> "Transaction":
        """Create a Transaction with a freshly generated ID."""
        return cls(
            id=uuid.uuid4().hex,
            date=date,
            amount=amount,
            type=type,
            category=category,
            description=description,
            original_text=original_text,
        )

    @property
    def month_key(self) -> str:
        """Month bucket key in YYYY-MM form."""
        return f"{self.date.year:04d}-{self.date.month:02d}"

    def to_dict(self) -> dict:
        """Convert transaction to the JSON interchange shape."""
        data = {
            "id": self.id,
            "date": self.date.isoformat(),
            "amount": json_amount(self.amount),
            "category": self.category.value,
            "type": self.type.value,
            "description": self.description,
        }
        if self.original_text is not None:
            data["originalText"] = self.original_text
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        """Build a Transaction from the JSON interchange shape.

        Records without an ``id`` get a new one. Unknown categories fall back
        to ``Category.OTHER``.

        Raises:
            ValidationError: If date, amount or type is missing or invalid.
        """
        if not isinstance(data, dict):
            raise ValidationError(f"Expected an object, got {type(data).__name__}")

        for field in ("date", "amount", "type"):
            if data.get(field) is None or data.get(field) == "":
                raise ValidationError(f"Missing required field '{field}'")

        try:
            transaction_type = TransactionType(data["type"])
        except ValueError:
            raise ValidationError(f"Unknown transaction type: {data['type']!r}")

        try:
            category = Category(data.get("category"))
        except ValueError:
            category = Category.OTHER

        original_text = data.get("originalText")

        return cls(
            id=str(data.get("id") or uuid.uuid4().hex),
            date=parse_date(data["date"]),
            amount=parse_amount(data["amount"]),
            type=transaction_type,
            category=category,
            description=str(data.get("description") or ""),
            original_text=str(original_text) if original_text is not None else None,
        )


def parse_date(value) -> date:
    """Parse a zero-padded YYYY-MM-DD string.

    Raises:
        ValidationError: If the value is not a valid zero-padded date.
    """
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}")


def parse_amount(value) -> Decimal:
    """Parse a non-negative amount.

    Raises:
        ValidationError: If the value is not a finite, non-negative number
            that fits the decimal context.
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid amount {value!r}")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Invalid amount {value!r}")
    return check_amount(amount)


def check_amount(amount: Decimal) -> Decimal:
    """Check an amount is finite, non-negative and within decimal precision.

    Integer digits beyond the context precision cannot be summed or rounded
    exactly, so such amounts are rejected.

    Raises:
        ValidationError: If the amount is out of range.
    """
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount {amount}")
    if amount < 0:
        raise ValidationError(f"Amount must not be negative: {amount}")
    if amount and amount.adjusted() >= getcontext().prec:
        raise ValidationError(f"Amount is too large: {amount}")
    return amount


def json_amount(amount: Decimal):
    """Integral amounts serialize as ints, others as floats."""
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def migrate_record(record: dict) -> dict:
    """Upgrade a record persisted before transactions carried a type.

    A record without ``type`` is income when its category is the income
    category, otherwise an expense. Records that already have a type are
    returned unchanged.
    """
    if record.get("type"):
        return record
    migrated = dict(record)
    if record.get("category") == LEGACY_INCOME_CATEGORY:
        migrated["type"] = TransactionType.INCOME.value
    else:
        migrated["type"] = TransactionType.EXPENSE.value
    return migrated
