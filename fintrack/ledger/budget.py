"""
Budget Tracker

Holds the per-category spending limits and classifies a category's
total spend against its limit.

CLASSIFICATION (recomputed from scratch on every call, no memory):
- normal          no limit set, or total < ratio * limit
- near_threshold  ratio * limit <= total < limit
- over_limit      total >= limit

A limit of zero puts any positive total over the limit.
"""

from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Optional

import structlog

from fintrack.errors import NegativeLimitError, NoBudgetSetError
from fintrack.models.records import BudgetStatus, ExpenseCategory

logger = structlog.get_logger(__name__)

DEFAULT_NEAR_THRESHOLD_RATIO = Decimal("0.9")


class BudgetTracker:
    """Category -> limit table plus threshold classification."""

    def __init__(self, near_threshold_ratio: Decimal = DEFAULT_NEAR_THRESHOLD_RATIO):
        if not Decimal("0") <= near_threshold_ratio <= Decimal("1"):
            raise ValueError(
                f"near_threshold_ratio must be between 0 and 1, got {near_threshold_ratio}"
            )
        self._limits: dict[ExpenseCategory, Decimal] = {}
        self._ratio = near_threshold_ratio

    def set_budget(self, category: ExpenseCategory, limit: Decimal) -> None:
        """Set or overwrite the limit for a category."""
        if not limit.is_finite() or limit < 0:
            logger.warning("invalid_budget_limit", category=category.value, limit=str(limit))
            raise NegativeLimitError("Amount must be non-negative.")
        self._limits[category] = limit
        logger.info("budget_set", category=category.value, limit=str(limit))

    def delete_budget(self, category: ExpenseCategory) -> Decimal:
        """
        Remove the limit for a category and return it.

        Raises:
            NoBudgetSetError: if the category has no limit
        """
        if category not in self._limits:
            logger.warning("no_budget_to_delete", category=category.value)
            raise NoBudgetSetError(f"No budget has been set for {category.value}.")
        limit = self._limits.pop(category)
        logger.info("budget_deleted", category=category.value)
        return limit

    def get_budget(self, category: ExpenseCategory) -> Optional[Decimal]:
        """The limit for a category, or None when unlimited."""
        return self._limits.get(category)

    def budgets_view(self) -> Mapping[ExpenseCategory, Decimal]:
        """Read-only snapshot of all limits, in category declaration order."""
        return MappingProxyType({
            category: self._limits[category]
            for category in ExpenseCategory
            if category in self._limits
        })

    def classify(self, category: ExpenseCategory, total: Decimal) -> BudgetStatus:
        """Classify a category's total spend against its current limit."""
        limit = self._limits.get(category)
        if limit is None:
            return BudgetStatus.NORMAL
        if total >= limit:
            return BudgetStatus.OVER_LIMIT
        if total >= self._ratio * limit:
            return BudgetStatus.NEAR_THRESHOLD
        return BudgetStatus.NORMAL
