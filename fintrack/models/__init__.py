"""
Data Models Package

This package contains all Pydantic models used in FinTrack.
All data flowing through the ledger must conform to these schemas.
"""

from fintrack.models.records import (
    BalanceReport,
    BudgetStatus,
    Category,
    CategorySummary,
    Expense,
    ExpenseCategory,
    ExpenseResult,
    Income,
    IncomeCategory,
    LedgerSnapshot,
    MoneyRecord,
    YearMonth,
)
from fintrack.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Record models
    "BalanceReport",
    "BudgetStatus",
    "Category",
    "CategorySummary",
    "Expense",
    "ExpenseCategory",
    "ExpenseResult",
    "Income",
    "IncomeCategory",
    "LedgerSnapshot",
    "MoneyRecord",
    "YearMonth",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
