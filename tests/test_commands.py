"""Tests for the per-command parsers."""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from fintrack.errors import (
    DescriptionMisplacedError,
    FutureDateError,
    IndexTooSmallError,
    InvalidFilePathError,
    MalformedDateError,
    MalformedIndexError,
    MissingFieldError,
    NegativeLimitError,
    NonFiniteNumberError,
    NonPositiveAmountError,
    PreambleTextError,
    TrailingTextError,
    UnknownCategoryError,
    UnrecognizedFieldError,
)
from fintrack.models.records import (
    Expense,
    ExpenseCategory,
    Income,
    IncomeCategory,
    YearMonth,
)
from fintrack.parsing.commands import (
    ALIASES,
    COMMAND_USAGES,
    COMMANDS,
    ensure_no_arguments,
    expand_alias,
    parse_add_expense,
    parse_add_income,
    parse_delete_budget,
    parse_delete_index,
    parse_export_path,
    parse_modify_expense,
    parse_modify_income,
    parse_modify_index,
    parse_optional_month,
    parse_set_budget,
    split_command,
)

TODAY = date(2025, 10, 15)


class TestKeywords:
    """Tests for keyword splitting and alias expansion."""

    def test_split_command(self):
        """Test split command."""
        assert split_command("add-expense a/5 c/food d/2025-10-01") == (
            "add-expense",
            "a/5 c/food d/2025-10-01",
        )

    def test_split_command_without_args(self):
        """Test split command without args."""
        assert split_command("  list-budget  ") == ("list-budget", "")

    def test_alias_expands(self):
        """Test alias expands."""
        assert split_command("ae a/5") == ("add-expense", "a/5")
        assert expand_alias("EXIT") == "bye"

    def test_alias_expansion_is_idempotent(self):
        """Test alias expansion is idempotent."""
        for keyword in list(ALIASES) + list(COMMANDS):
            once = expand_alias(keyword)
            assert expand_alias(once) == once

    def test_every_alias_targets_a_command(self):
        """Test every alias targets a command."""
        assert set(ALIASES.values()) <= set(COMMANDS)

    def test_every_command_has_usage(self):
        """Test every command has usage."""
        assert set(COMMAND_USAGES) == set(COMMANDS)

    def test_unknown_keyword_passes_through(self):
        """Test unknown keyword passes through."""
        assert expand_alias("Dance") == "dance"

    def test_ensure_no_arguments(self):
        """Test ensure no arguments."""
        ensure_no_arguments("help", "   ")
        with pytest.raises(
            TrailingTextError,
            match="The 'summary-expense' command does not take additional arguments.",
        ):
            ensure_no_arguments("summary-expense", "extra")


class TestAddCommands:
    """Tests for add-expense and add-income."""

    def test_add_expense(self):
        """Test add expense."""
        expense = parse_add_expense("a/12.5 c/Food d/2025-10-01 des/lunch", today=TODAY)
        assert expense == Expense(
            amount=Decimal("12.5"),
            category=ExpenseCategory.FOOD,
            date=date(2025, 10, 1),
            description="lunch",
        )

    def test_add_expense_any_order(self):
        """Test add expense any order."""
        a = parse_add_expense("d/2025-10-01 c/food a/3", today=TODAY)
        b = parse_add_expense("a/3 d/2025-10-01 c/food", today=TODAY)
        assert a == b

    def test_add_income(self):
        """Test add income."""
        income = parse_add_income("a/3000 c/salary d/2025-10-01", today=TODAY)
        assert isinstance(income, Income)
        assert income.category is IncomeCategory.SALARY
        assert income.description is None

    def test_no_arguments(self):
        """Test add command with no arguments."""
        with pytest.raises(MissingFieldError, match="Missing parameters. See 'help'."):
            parse_add_expense("   ", today=TODAY)

    def test_zero_amount(self):
        """Test zero amount is rejected."""
        with pytest.raises(NonPositiveAmountError):
            parse_add_expense("a/0 c/food d/2025-10-01", today=TODAY)

    def test_nan_amount(self):
        """Test NaN amount is rejected."""
        with pytest.raises(NonFiniteNumberError):
            parse_add_income("a/NaN c/gift d/2025-10-01", today=TODAY)

    def test_unknown_category(self):
        """Test unknown category."""
        with pytest.raises(UnknownCategoryError, match="Unknown income category!"):
            parse_add_income("a/5 c/food d/2025-10-01", today=TODAY)

    def test_empty_category_is_missing(self):
        """Test empty category is missing."""
        with pytest.raises(MissingFieldError):
            parse_add_expense("a/10 c/ d/2025-10-10", today=TODAY)

    def test_future_date_rejected_by_default(self):
        """Test future date rejected by default."""
        with pytest.raises(FutureDateError):
            parse_add_expense("a/10 c/food d/2025-12-01", today=TODAY)

    def test_future_date_allowed_when_enabled(self):
        """Test future date allowed when enabled."""
        expense = parse_add_expense("a/10 c/food d/2025-12-01", allow_future=True, today=TODAY)
        assert expense.date == date(2025, 12, 1)

    def test_description_must_be_last(self):
        """Test description must be last."""
        with pytest.raises(DescriptionMisplacedError):
            parse_add_expense("a/10 des/bus ride c/transport d/2025-10-01", today=TODAY)


class TestModifyCommands:
    """Tests for modify-expense and modify-income."""

    OLD_EXPENSE = Expense(
        amount=Decimal("10"),
        category=ExpenseCategory.FOOD,
        date=date(2025, 10, 1),
        description="lunch",
    )
    OLD_INCOME = Income(
        amount=Decimal("100"),
        category=IncomeCategory.GIFT,
        date=date(2025, 10, 2),
    )

    def test_modify_index(self):
        """Test modify index."""
        assert parse_modify_index("2 a/5", "Expense") == 2

    def test_modify_index_missing(self):
        """Test modify index missing."""
        with pytest.raises(MissingFieldError, match="Missing expense index."):
            parse_modify_index("", "Expense")

    def test_modify_index_malformed(self):
        """Test modify index malformed."""
        with pytest.raises(MalformedIndexError):
            parse_modify_index("a/5", "Expense")

    def test_modify_index_zero(self):
        """Test modify index zero."""
        with pytest.raises(IndexTooSmallError, match="Income index must be a positive number."):
            parse_modify_index("0 a/5", "Income")

    def test_omitted_fields_keep_old_values(self):
        """Test omitted fields keep old values."""
        new = parse_modify_expense("1 a/25", self.OLD_EXPENSE, today=TODAY)
        assert new.amount == Decimal("25")
        assert new.category is ExpenseCategory.FOOD
        assert new.date == date(2025, 10, 1)
        assert new.description == "lunch"

    def test_all_fields_replaced(self):
        """Test all fields replaced."""
        new = parse_modify_expense(
            "1 c/transport d/2025-09-30 a/3 des/bus",
            self.OLD_EXPENSE,
            today=TODAY,
        )
        assert new == Expense(
            amount=Decimal("3"),
            category=ExpenseCategory.TRANSPORT,
            date=date(2025, 9, 30),
            description="bus",
        )

    def test_no_fields_is_a_copy(self):
        """Test no fields is a copy."""
        assert parse_modify_expense("1", self.OLD_EXPENSE, today=TODAY) == self.OLD_EXPENSE

    def test_modify_income_category(self):
        """Test modify income category."""
        new = parse_modify_income("4 c/scholarship", self.OLD_INCOME, today=TODAY)
        assert new.category is IncomeCategory.SCHOLARSHIP
        assert new.amount == Decimal("100")

    def test_modify_rejects_bad_amount(self):
        """Test modify rejects bad amount."""
        with pytest.raises(NonPositiveAmountError):
            parse_modify_expense("1 a/-3", self.OLD_EXPENSE, today=TODAY)

    def test_modify_rejects_unknown_category(self):
        """Test modify rejects unknown category."""
        with pytest.raises(UnknownCategoryError):
            parse_modify_income("1 c/food", self.OLD_INCOME, today=TODAY)

    def test_modify_rejects_future_date(self):
        """Test modify rejects future date."""
        with pytest.raises(FutureDateError):
            parse_modify_expense("1 d/2026-01-01", self.OLD_EXPENSE, today=TODAY)

    def test_modify_rejects_preamble(self):
        """Test modify rejects preamble."""
        with pytest.raises(PreambleTextError, match="'junk'"):
            parse_modify_expense("1 junk a/5", self.OLD_EXPENSE, today=TODAY)


class TestDeleteIndex:
    """Tests for delete-expense and delete-income arguments."""

    def test_valid(self):
        """Test valid delete index."""
        assert parse_delete_index(" 3 ", "Expense") == 3

    def test_missing(self):
        """Test missing delete index."""
        with pytest.raises(
            MissingFieldError,
            match="Missing income index. Usage: delete-income <index>",
        ):
            parse_delete_index("", "Income")

    def test_trailing_text(self):
        """Test text after the delete index."""
        with pytest.raises(TrailingTextError):
            parse_delete_index("3 4", "Expense")

    def test_malformed(self):
        """Test malformed delete index."""
        with pytest.raises(MalformedIndexError):
            parse_delete_index("three", "Expense")


class TestMonthFilter:
    """Tests for the optional d/YYYY-MM filter."""

    def test_absent(self):
        """Test absent month filter."""
        assert parse_optional_month("", "list-expense") is None
        assert parse_optional_month("   ", "balance") is None

    def test_present(self):
        """Test present month filter."""
        assert parse_optional_month("d/2025-10", "list-expense") == YearMonth(year=2025, month=10)

    def test_malformed(self):
        """Test malformed month filter."""
        with pytest.raises(MalformedDateError):
            parse_optional_month("d/2025-10-01", "list-expense")

    def test_other_field_rejected(self):
        """Test other field rejected."""
        with pytest.raises(UnrecognizedFieldError, match=r"Usage: balance \[d/YYYY-MM\]"):
            parse_optional_month("c/food", "balance")

    def test_bare_text_rejected(self):
        """Test bare text rejected."""
        with pytest.raises(PreambleTextError):
            parse_optional_month("october", "list-income")


class TestBudgetCommands:
    """Tests for budget and delete-budget arguments."""

    def test_set_budget(self):
        """Test set budget."""
        assert parse_set_budget("c/food a/100") == (ExpenseCategory.FOOD, Decimal("100"))
        assert parse_set_budget("a/100 c/FOOD") == (ExpenseCategory.FOOD, Decimal("100"))

    def test_set_budget_zero(self):
        """Test set budget zero."""
        assert parse_set_budget("c/rent a/0") == (ExpenseCategory.RENT, Decimal("0"))

    def test_set_budget_negative(self):
        """Test set budget negative."""
        with pytest.raises(NegativeLimitError):
            parse_set_budget("c/rent a/-1")

    def test_set_budget_missing_parameters(self):
        """Test set budget missing parameters."""
        with pytest.raises(MissingFieldError, match="Missing parameters for budget command."):
            parse_set_budget("")

    def test_set_budget_missing_amount(self):
        """Test set budget missing amount."""
        with pytest.raises(MissingFieldError):
            parse_set_budget("c/food")

    def test_set_budget_income_category(self):
        """Test set budget income category."""
        with pytest.raises(UnknownCategoryError):
            parse_set_budget("c/salary a/100")

    def test_set_budget_rejects_description(self):
        """Test set budget rejects description."""
        with pytest.raises(UnrecognizedFieldError):
            parse_set_budget("c/food a/100 des/monthly")

    def test_delete_budget(self):
        """Test delete budget."""
        assert parse_delete_budget("c/Transport") is ExpenseCategory.TRANSPORT

    def test_delete_budget_missing(self):
        """Test delete budget missing."""
        with pytest.raises(MissingFieldError):
            parse_delete_budget("  ")


class TestExportPath:
    """Tests for export destination validation."""

    def test_suffix_kept(self):
        """Test suffix kept."""
        assert parse_export_path("out/data.csv") == Path("out/data.csv")

    def test_suffix_appended(self):
        """Test suffix appended."""
        assert parse_export_path("report") == Path("report.csv")

    def test_custom_suffix(self):
        """Test custom suffix."""
        assert parse_export_path("report", default_suffix=".txt") == Path("report.txt")

    def test_missing(self):
        """Test missing export path."""
        with pytest.raises(MissingFieldError, match="Missing file path."):
            parse_export_path("")

    def test_control_characters(self):
        """Test control characters."""
        with pytest.raises(InvalidFilePathError):
            parse_export_path("bad\x00name.csv")

    def test_directory_only(self):
        """Test directory only."""
        with pytest.raises(InvalidFilePathError):
            parse_export_path("..")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
