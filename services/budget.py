"""Monthly budget service."""

from decimal import Decimal

from errors import ValidationError
from logger import get_logger
from models.transaction import parse_amount

logger = get_logger()


class BudgetService:
    """Service for reading and updating the monthly budget."""

    def __init__(self, persistence):
        """Initialize the budget service.

        Args:
            persistence: Object providing load_budget() and save_budget().
        """
        self.persistence = persistence

    def get(self) -> Decimal:
        """Get the monthly budget, 0 if none was ever set."""
        budget = self.persistence.load_budget()
        return budget if budget is not None else Decimal("0")

    def set(self, amount) -> Decimal:
        """Set the monthly budget.

        Args:
            amount: New budget, a non-negative number.

        Returns:
            The stored budget.

        Raises:
            ValidationError: If the amount is negative or not a number.
        """
        try:
            budget = parse_amount(amount)
        except ValidationError as e:
            raise ValidationError(f"Invalid budget: {e}") from e

        self.persistence.save_budget(budget)
        logger.info(f"Monthly budget set to {budget}")
        return budget
