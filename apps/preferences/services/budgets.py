"""Monthly budgets per category."""

import logging
from decimal import Decimal, InvalidOperation
from uuid import UUID

from .exceptions import InvalidPreferenceError
from .store import get_preference, set_preference

logger = logging.getLogger(__name__)

BUDGETS_KEY = 'categoryBudgets'


def _parse_amount(value):
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    return amount if amount.is_finite() else None


def load_budgets() -> dict:
    """
    Read the stored budgets.

    Returns:
        Dict mapping category id (str) to a positive Decimal amount.
        Unreadable entries are skipped.
    """
    stored = get_preference(BUDGETS_KEY, {})
    if not isinstance(stored, dict):
        logger.warning("Ignoring invalid stored budgets: %r", stored)
        return {}

    budgets = {}
    for category_id, value in stored.items():
        amount = _parse_amount(value)
        if amount is None or amount <= 0:
            logger.warning("Skipping invalid budget for category %s: %r", category_id, value)
            continue
        budgets[category_id] = amount
    return budgets


def _save_budgets(budgets: dict) -> None:
    set_preference(BUDGETS_KEY, {key: str(amount) for key, amount in budgets.items()})


def set_budget(*, category_id: UUID, amount) -> dict:
    """
    Set a category's monthly budget.

    A zero or negative amount removes the budget.

    Returns:
        All budgets after the change

    Raises:
        InvalidPreferenceError: If amount is not a number
    """
    parsed = _parse_amount(amount)
    if parsed is None:
        raise InvalidPreferenceError("Budget must be a number")

    budgets = load_budgets()
    key = str(category_id)

    if parsed > 0:
        budgets[key] = parsed
    else:
        budgets.pop(key, None)

    _save_budgets(budgets)
    return budgets


def remove_budget(*, category_id: UUID) -> dict:
    budgets = load_budgets()
    budgets.pop(str(category_id), None)
    _save_budgets(budgets)
    return budgets
