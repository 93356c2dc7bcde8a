"""
FinTrack - Ledger Core

An in-memory personal finance ledger driven by short text commands.
Expenses and incomes are kept newest-first, spending is checked against
per-category budgets, and every change is auditable.

DESIGN PRINCIPLES:
1. Fail early, fail visibly
2. No silent corrections
3. A rejected command changes nothing
4. Every mutation must be auditable
5. Presentation and storage live outside the core
"""

__version__ = "1.0.0"
__author__ = "FinTrack Team"
