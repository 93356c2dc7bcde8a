"""Shared fixtures for FinTrack tests."""

from datetime import date
from decimal import Decimal

import pytest

from fintrack.audit import AuditLogger
from fintrack.config import InputSettings
from fintrack.ledger import FinanceManager
from fintrack.models.records import Expense, ExpenseCategory, Income, IncomeCategory
from fintrack.orchestrator import CommandFlow

TODAY = date(2025, 10, 15)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def manager() -> FinanceManager:
    return FinanceManager()


@pytest.fixture
def audit_logger() -> AuditLogger:
    return AuditLogger(max_events=100)


@pytest.fixture
def input_settings() -> InputSettings:
    return InputSettings(allow_future_dates=False, ascii_only=True, export_suffix=".csv")


@pytest.fixture
def flow(manager, audit_logger, input_settings) -> CommandFlow:
    return CommandFlow(
        manager=manager,
        audit_logger=audit_logger,
        input_settings=input_settings,
        today=lambda: TODAY,
    )


def make_expense(amount="10", category=ExpenseCategory.FOOD, day=date(2025, 10, 1), description=None):
    return Expense(
        amount=Decimal(amount),
        category=category,
        date=day,
        description=description,
    )


def make_income(amount="100", category=IncomeCategory.SALARY, day=date(2025, 10, 1), description=None):
    return Income(
        amount=Decimal(amount),
        category=category,
        date=day,
        description=description,
    )
