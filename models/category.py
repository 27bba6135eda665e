"""Transaction types and categories."""

from enum import Enum


class TransactionType(str, Enum):
    """Coarse cash-flow classification of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"
    SAVING = "saving"
    INVESTMENT = "investment"


class Category(str, Enum):
    """Fixed set of categories.

    Values are the display labels persisted with each record, so they must not
    change once data has been written.
    """

    FOOD = "Ăn uống"
    HANG_OUT = "Đi chơi & Giải trí"
    SHOPPING = "Mua sắm"
    INCOME = "Thu nhập"
    SAVING = "Tiết kiệm"
    INVESTMENT = "Đầu tư"
    LOAN_DEBT = "Nợ & Vay"
    OTHER = "Khác"


# Categories that only make sense for their matching non-expense type
NON_EXPENSE_CATEGORIES = {
    Category.INCOME: TransactionType.INCOME,
    Category.SAVING: TransactionType.SAVING,
    Category.INVESTMENT: TransactionType.INVESTMENT,
}

EXPENSE_CATEGORIES = [c for c in Category if c not in NON_EXPENSE_CATEGORIES]


def is_consistent(type: TransactionType, category: Category) -> bool:
    """Check that a category does not contradict its transaction type.

    INCOME, SAVING and INVESTMENT categories are reserved for the type of the
    same name. Every other category may be paired with any type (a loan, for
    example, is income typed with the LOAN_DEBT category).
    """
    required = NON_EXPENSE_CATEGORIES.get(category)
    return required is None or required == type
