from decimal import Decimal

import pytest

from errors import ValidationError
from services.budget import BudgetService
from tests.helpers import MemoryPersistence


class TestBudgetService:
    """Tests for BudgetService."""

    def test_defaults_to_zero(self):
        assert BudgetService(MemoryPersistence()).get() == Decimal("0")

    def test_set_and_get(self):
        budget = BudgetService(MemoryPersistence())

        budget.set("5000000")

        assert budget.get() == Decimal("5000000")

    @pytest.mark.parametrize("value", [-1, "lots"])
    def test_set_rejects_invalid(self, value):
        persistence = MemoryPersistence(budget=Decimal("10"))
        budget = BudgetService(persistence)

        with pytest.raises(ValidationError):
            budget.set(value)

        assert budget.get() == Decimal("10")

    def test_persisted_in_database(self, services):
        """Test the budget survives a new service over the same database."""
        services.budget.set(2500000)

        assert BudgetService(services.persistence).get() == Decimal("2500000")
