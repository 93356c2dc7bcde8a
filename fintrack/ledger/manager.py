"""
Finance Manager

The session-scoped owner of both ledgers and the budget table. All
mutation goes through this class; everything it hands back is an
immutable snapshot.

MODIFY IS ATOMIC:
    Stable(old) -> Removed -> Stable(new)      on success
    Stable(old) -> Removed -> Stable(old)      on any failure

The old record is restored under its original insertion sequence, so
order and totals after a failed modify are identical to before it. The
failure that caused the rollback is re-raised unchanged.
"""

from decimal import Decimal
from typing import Callable, Mapping, Optional, TypeVar, Union

import structlog

from fintrack.ledger.budget import DEFAULT_NEAR_THRESHOLD_RATIO, BudgetTracker
from fintrack.ledger.store import ExpenseLedger, IncomeLedger, RecordLedger
from fintrack.models.records import (
    BalanceReport,
    CategorySummary,
    Expense,
    ExpenseCategory,
    ExpenseResult,
    Income,
    LedgerSnapshot,
    YearMonth,
)

logger = structlog.get_logger(__name__)

R = TypeVar("R", Expense, Income)

# Either the replacement record itself, or a function building it from the old one
Replacement = Union[R, Callable[[R], R]]


class FinanceManager:
    """
    Expenses, incomes and budgets for one session.

    GUARANTEES:
    - Both ledgers are newest-first at all times
    - Every expense insertion is classified against its category budget
    - A failed operation leaves no trace in the ledgers
    """

    def __init__(
        self,
        near_threshold_ratio: Decimal = DEFAULT_NEAR_THRESHOLD_RATIO,
        budget_tracker: Optional[BudgetTracker] = None,
    ):
        self._expenses = ExpenseLedger()
        self._incomes = IncomeLedger()
        self._budgets = budget_tracker or BudgetTracker(near_threshold_ratio)

    # =========================================================================
    # EXPENSES
    # =========================================================================

    def add_expense(self, expense: Expense) -> ExpenseResult:
        """Store an expense and classify its category's spend."""
        self._expenses.insert(expense)
        result = self._evaluate(expense)
        logger.info(
            "expense_added",
            category=expense.category.value,
            amount=str(expense.amount),
            budget_status=result.budget_status.value,
        )
        return result

    def delete_expense(self, index: int) -> Expense:
        """Delete by 1-based visible index and return the removed expense."""
        removed = self._expenses.delete(index)
        logger.info("expense_deleted", index=index)
        return removed

    def get_expense(self, index: int) -> Expense:
        return self._expenses.get(index)

    def modify_expense(self, index: int, replacement: Replacement) -> ExpenseResult:
        """
        Replace the expense at index.

        Args:
            index: 1-based visible index.
            replacement: The new expense, or a function that receives the
                         current expense and returns the new one.

        Returns:
            The new expense with a fresh budget classification.

        Raises:
            Whatever deleting, building or inserting raised. The ledger is
            restored before the error propagates.
        """
        new_expense = self._modify(self._expenses, index, replacement)
        return self._evaluate(new_expense)

    def expenses_view(self, month: Optional[YearMonth] = None) -> tuple[Expense, ...]:
        """Newest-first expenses, optionally for one month only."""
        if month is None:
            return self._expenses.view()
        return self._expenses.view_month(month)

    def total_expense(self, month: Optional[YearMonth] = None) -> Decimal:
        return self._expenses.total(month)

    def category_total(self, category: ExpenseCategory) -> Decimal:
        """Total spend for a category across the whole expense ledger."""
        return self._expenses.total_for_category(category)

    def summarize_expenses(self, month: Optional[YearMonth] = None) -> CategorySummary:
        return self._summarize(self._expenses, month)

    # =========================================================================
    # INCOMES
    # =========================================================================

    def add_income(self, income: Income) -> Income:
        self._incomes.insert(income)
        logger.info(
            "income_added",
            category=income.category.value,
            amount=str(income.amount),
        )
        return income

    def delete_income(self, index: int) -> Income:
        """Delete by 1-based visible index and return the removed income."""
        removed = self._incomes.delete(index)
        logger.info("income_deleted", index=index)
        return removed

    def get_income(self, index: int) -> Income:
        return self._incomes.get(index)

    def modify_income(self, index: int, replacement: Replacement) -> Income:
        """Income counterpart of modify_expense. No budget classification."""
        return self._modify(self._incomes, index, replacement)

    def incomes_view(self, month: Optional[YearMonth] = None) -> tuple[Income, ...]:
        """Newest-first incomes, optionally for one month only."""
        if month is None:
            return self._incomes.view()
        return self._incomes.view_month(month)

    def total_income(self, month: Optional[YearMonth] = None) -> Decimal:
        return self._incomes.total(month)

    def summarize_incomes(self, month: Optional[YearMonth] = None) -> CategorySummary:
        return self._summarize(self._incomes, month)

    # =========================================================================
    # BALANCE
    # =========================================================================

    def balance(self, month: Optional[YearMonth] = None) -> Decimal:
        """Total income minus total expense."""
        return self.total_income(month) - self.total_expense(month)

    def balance_report(self, month: Optional[YearMonth] = None) -> BalanceReport:
        return BalanceReport(
            month=month,
            total_income=self.total_income(month),
            total_expense=self.total_expense(month),
        )

    # =========================================================================
    # BUDGETS
    # =========================================================================

    def set_budget(self, category: ExpenseCategory, limit: Decimal) -> None:
        self._budgets.set_budget(category, limit)

    def delete_budget(self, category: ExpenseCategory) -> Decimal:
        """Raises NoBudgetSetError when the category has no limit."""
        return self._budgets.delete_budget(category)

    def get_budget(self, category: ExpenseCategory) -> Optional[Decimal]:
        return self._budgets.get_budget(category)

    def budgets_view(self) -> Mapping[ExpenseCategory, Decimal]:
        return self._budgets.budgets_view()

    # =========================================================================
    # EXPORT
    # =========================================================================

    def snapshot(self) -> LedgerSnapshot:
        """Everything an export or persistence collaborator needs."""
        return LedgerSnapshot(
            incomes=self._incomes.view(),
            expenses=self._expenses.view(),
            budgets=dict(self._budgets.budgets_view()),
            total_income=self.total_income(),
            total_expense=self.total_expense(),
        )

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _evaluate(self, expense: Expense) -> ExpenseResult:
        """Classify the expense's category after it has been stored."""
        total = self._expenses.total_for_category(expense.category)
        return ExpenseResult(
            record=expense,
            budget_status=self._budgets.classify(expense.category, total),
            category_total=total,
            budget_limit=self._budgets.get_budget(expense.category),
        )

    def _modify(self, ledger: RecordLedger, index: int, replacement: Replacement):
        entry = ledger.remove_entry(index)
        try:
            candidate = replacement(entry.record) if callable(replacement) else replacement
            ledger.insert(candidate)
        except Exception as e:
            ledger.restore(entry)
            logger.warning(
                "modify_rolled_back",
                ledger=ledger.label,
                index=index,
                error=str(e),
            )
            raise
        logger.info("record_modified", ledger=ledger.label, index=index)
        return candidate

    @staticmethod
    def _summarize(ledger: RecordLedger, month: Optional[YearMonth]) -> CategorySummary:
        totals = ledger.totals_by_category(month)
        top = max(totals, key=totals.get) if totals else None
        return CategorySummary(
            totals=totals,
            total=sum(totals.values(), Decimal("0")),
            top_category=top,
        )
