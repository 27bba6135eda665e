"""Base provider interface for LLM implementations."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict

from models.category import Category, TransactionType


@dataclass
class TransactionDraft:
    """Structured result of parsing one statement fragment."""

    amount: Decimal
    type: TransactionType
    category: Category
    description: str


class LLMProvider(ABC):
    """Abstract base class for LLM providers.

    A provider turns one trimmed, non-empty statement fragment into the raw
    fields the model extracted. Normalizing those fields into a
    TransactionDraft happens in the classification module, so every
    provider gets the same fallback rules.
    """

    @abstractmethod
    def parse_fragment(self, fragment: str) -> Dict[str, Any]:
        """Extract transaction fields from a fragment.

        Args:
            fragment: A single statement, e.g. "ăn sáng 30k".

        Returns:
            Dictionary with 'amount', 'type', 'category' and 'description'
            keys, as returned by the model (values may be missing or invalid).

        Raises:
            ClassificationError: If the model call fails or returns nothing.
        """
        pass
