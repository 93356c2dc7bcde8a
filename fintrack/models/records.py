"""
Core Data Models for FinTrack

These models define the strict schemas for every record the ledger holds
and every result the ledger hands back. They are designed to:
1. Enforce the record invariants at construction time
2. Be immutable once created (frozen), so stored records can be shared
   with callers without risk of corrupting ordering or totals
3. Be serializable for logging and for export collaborators

DESIGN DECISION: Amounts are Decimal, never float. Totals and budget
thresholds are compared exactly.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from fintrack.errors import UnknownCategoryError


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

def _parse_category(enum_cls, text: Optional[str], label: str):
    """Case-insensitive lookup of a category name, ignoring surrounding whitespace."""
    key = text.strip().upper() if text is not None else ""
    member = enum_cls.__members__.get(key)
    if member is None:
        available = ", ".join(enum_cls.__members__)
        raise UnknownCategoryError(
            f"Unknown {label} category!\nAvailable categories: [{available}]"
        )
    return member


class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    Budgets can only be set for these categories.
    """
    FOOD = "FOOD"
    STUDY = "STUDY"
    TRANSPORT = "TRANSPORT"
    BILLS = "BILLS"
    ENTERTAINMENT = "ENTERTAINMENT"
    RENT = "RENT"
    GROCERIES = "GROCERIES"
    OTHERS = "OTHERS"

    @classmethod
    def parse(cls, text: Optional[str]) -> "ExpenseCategory":
        """Parse user text such as ' food ' into a category."""
        return _parse_category(cls, text, "expense")


class IncomeCategory(str, Enum):
    """Supported income categories."""
    SALARY = "SALARY"
    SCHOLARSHIP = "SCHOLARSHIP"
    INVESTMENT = "INVESTMENT"
    GIFT = "GIFT"
    OTHERS = "OTHERS"

    @classmethod
    def parse(cls, text: Optional[str]) -> "IncomeCategory":
        """Parse user text such as 'salary' into a category."""
        return _parse_category(cls, text, "income")


class BudgetStatus(str, Enum):
    """
    Classification of a category's cumulative spend against its limit.

    Recomputed from scratch on every expense insertion.
    """
    NORMAL = "normal"
    NEAR_THRESHOLD = "near_threshold"
    OVER_LIMIT = "over_limit"

    @property
    def is_over_budget(self) -> bool:
        return self is BudgetStatus.OVER_LIMIT

    @property
    def is_near_budget(self) -> bool:
        return self is BudgetStatus.NEAR_THRESHOLD


# =============================================================================
# MONEY RECORDS
# =============================================================================

class _MoneyRecord(BaseModel):
    """
    Fields shared by expenses and incomes.

    CRITICAL: amount is always finite and strictly positive. A record that
    violates this cannot be constructed.
    """
    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(
        ...,
        gt=0,
        allow_inf_nan=False,
        description="Amount of money, finite and greater than zero"
    )
    date: date
    description: Optional[str] = Field(
        default=None,
        description="Free text; stored verbatim once captured"
    )

    @field_validator('description')
    @classmethod
    def blank_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v

    def in_month(self, month: "YearMonth") -> bool:
        return month.contains(self.date)


class Expense(_MoneyRecord):
    """A single expense. Immutable once created."""

    category: ExpenseCategory = Field(
        ...,
        description="Expense category"
    )


class Income(_MoneyRecord):
    """A single income. Immutable once created."""

    category: IncomeCategory = Field(
        ...,
        description="Income category"
    )


MoneyRecord = Union[Expense, Income]
Category = Union[ExpenseCategory, IncomeCategory]


class YearMonth(BaseModel):
    """A calendar month, rendered as YYYY-MM."""
    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=1, le=9999)
    month: int = Field(..., ge=1, le=12)

    @classmethod
    def of(cls, day: date) -> "YearMonth":
        return cls(year=day.year, month=day.month)

    def contains(self, day: date) -> bool:
        return day.year == self.year and day.month == self.month

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


# =============================================================================
# RESULT MODELS
# =============================================================================

class ExpenseResult(BaseModel):
    """
    Outcome of adding or modifying an expense.

    budget_status is computed against the category total AFTER the
    expense was stored.
    """
    model_config = ConfigDict(frozen=True)

    record: Expense
    budget_status: BudgetStatus = BudgetStatus.NORMAL
    category_total: Decimal = Field(
        ...,
        description="Total spend for the record's category across the whole ledger"
    )
    budget_limit: Optional[Decimal] = Field(
        default=None,
        description="Configured limit for the category, if any"
    )


class CategorySummary(BaseModel):
    """Per-category totals for one ledger. Only categories in use appear."""
    model_config = ConfigDict(frozen=True)

    totals: dict[Category, Decimal] = Field(default_factory=dict)
    total: Decimal = Decimal("0")
    top_category: Optional[Category] = None

    @property
    def is_empty(self) -> bool:
        return not self.totals


class BalanceReport(BaseModel):
    """Income minus expense, over everything or over one month."""
    model_config = ConfigDict(frozen=True)

    month: Optional[YearMonth] = None
    total_income: Decimal
    total_expense: Decimal

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expense


class LedgerSnapshot(BaseModel):
    """
    Read-only copy of the whole session state.

    This is what persistence and export collaborators receive.
    """
    model_config = ConfigDict(frozen=True)

    taken_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    incomes: tuple[Income, ...] = ()
    expenses: tuple[Expense, ...] = ()
    budgets: dict[ExpenseCategory, Decimal] = Field(default_factory=dict)
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")

    @property
    def balance(self) -> Decimal:
        return self.total_income - self.total_expense
