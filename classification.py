"""Turning free-text spending statements into transactions.

A submission such as "ăn sáng 30k, lương 10tr" is split on commas into
fragments. Each fragment is parsed by an LLM provider concurrently; the
results are joined in submission order once every fragment has been parsed.
If any fragment fails, the whole submission fails and no transactions are
produced, so the caller can keep the original text for a retry.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

from errors import ClassificationError
from llm.providers.base import LLMProvider, TransactionDraft
from logger import get_logger
from models.category import Category, TransactionType, is_consistent
from models.transaction import Transaction

logger = get_logger()

# Fragments containing these are always an outing expense
HANG_OUT_KEYWORDS = ("cafe", "ăn phố")


def split_fragments(text: str) -> List[str]:
    """Split a submission on commas into trimmed, non-empty fragments."""
    return [part.strip() for part in text.split(",") if part.strip()]


def normalize_draft(fragment: str, raw: Dict[str, Any]) -> TransactionDraft:
    """Apply fallback rules to the fields a provider extracted.

    - Unknown categories become OTHER; unknown types become expense.
    - Income left in OTHER moves to INCOME.
    - Saving and investment always use their own category.
    - Fragments mentioning a cafe or eating out are an outing expense.
    - A missing amount is 0 and a missing description is the fragment.

    Raises:
        ClassificationError: If the amount is not a number.
    """
    try:
        category = Category(raw.get("category"))
    except ValueError:
        category = Category.OTHER

    try:
        transaction_type = TransactionType(raw.get("type"))
    except ValueError:
        transaction_type = TransactionType.EXPENSE

    if transaction_type == TransactionType.INCOME and category == Category.OTHER:
        category = Category.INCOME
    if transaction_type == TransactionType.SAVING:
        category = Category.SAVING
    if transaction_type == TransactionType.INVESTMENT:
        category = Category.INVESTMENT

    lowered = fragment.lower()
    if any(keyword in lowered for keyword in HANG_OUT_KEYWORDS):
        category = Category.HANG_OUT
        transaction_type = TransactionType.EXPENSE

    # Reserved categories never stay on a type they contradict
    if not is_consistent(transaction_type, category):
        if transaction_type == TransactionType.INCOME:
            category = Category.INCOME
        else:
            category = Category.OTHER

    try:
        amount = abs(Decimal(str(raw.get("amount") or 0)))
    except InvalidOperation as e:
        raise ClassificationError(
            f"Could not read an amount from '{fragment}'", fragment=fragment
        ) from e
    if not amount.is_finite():
        raise ClassificationError(
            f"Could not read an amount from '{fragment}'", fragment=fragment
        )

    return TransactionDraft(
        amount=amount,
        type=transaction_type,
        category=category,
        description=raw.get("description") or fragment,
    )


def classify_fragment(provider: LLMProvider, fragment: str) -> TransactionDraft:
    """Parse and normalize a single fragment.

    Raises:
        ClassificationError: If the provider fails for any reason.
    """
    try:
        raw = provider.parse_fragment(fragment)
    except ClassificationError:
        raise
    except Exception as e:
        raise ClassificationError(
            f"Could not understand '{fragment}': {e}", fragment=fragment
        ) from e
    if not isinstance(raw, dict):
        raise ClassificationError(
            f"Could not understand '{fragment}'", fragment=fragment
        )
    return normalize_draft(fragment, raw)


def classify_text(
    text: str,
    provider: LLMProvider,
    entry_date: date,
    concurrency: int = 4,
) -> List[Transaction]:
    """Turn a submission into transactions, all or nothing.

    Every fragment is parsed, even after another one has failed; results are
    only combined once all of them have finished.

    Args:
        text: The raw submission.
        provider: LLM provider used to parse each fragment.
        entry_date: Date assigned to every resulting transaction.
        concurrency: Maximum number of fragments parsed at once.

    Returns:
        One Transaction per fragment, in the order the fragments appear.

    Raises:
        ClassificationError: If the text is empty or any fragment fails.
        ValueError: If concurrency is not a positive integer.
    """
    if not isinstance(concurrency, int) or concurrency < 1:
        raise ValueError("concurrency must be a positive integer")

    fragments = split_fragments(text)
    if not fragments:
        raise ClassificationError("Nothing to parse: the input is empty")

    logger.info(f"Parsing {len(fragments)} fragment(s)")

    with ThreadPoolExecutor(max_workers=min(concurrency, len(fragments))) as pool:
        futures = [
            pool.submit(classify_fragment, provider, fragment) for fragment in fragments
        ]

    # The executor has waited for every future; collect in submission order
    drafts = []
    for fragment, future in zip(fragments, futures):
        error = future.exception()
        if error is not None:
            logger.error(f"Failed to parse '{fragment}': {error}")
            raise error
        drafts.append(future.result())

    return [
        Transaction.create(
            date=entry_date,
            amount=draft.amount,
            type=draft.type,
            category=draft.category,
            description=draft.description,
            original_text=fragment,
        )
        for fragment, draft in zip(fragments, drafts)
    ]
