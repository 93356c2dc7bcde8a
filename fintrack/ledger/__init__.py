"""
Ledger package.

In-memory, session-scoped storage: the newest-first record ledgers, the
budget table and the FinanceManager that coordinates them.
"""

from fintrack.ledger.budget import DEFAULT_NEAR_THRESHOLD_RATIO, BudgetTracker
from fintrack.ledger.manager import FinanceManager
from fintrack.ledger.store import ExpenseLedger, IncomeLedger, LedgerEntry, RecordLedger

__all__ = [
    "DEFAULT_NEAR_THRESHOLD_RATIO",
    "BudgetTracker",
    "FinanceManager",
    "ExpenseLedger",
    "IncomeLedger",
    "LedgerEntry",
    "RecordLedger",
]
