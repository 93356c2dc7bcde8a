"""Tests for per-category budgets and threshold classification."""

from decimal import Decimal

import pytest

from fintrack.errors import NegativeLimitError, NoBudgetSetError
from fintrack.ledger.budget import BudgetTracker
from fintrack.models.records import BudgetStatus, ExpenseCategory

FOOD = ExpenseCategory.FOOD


@pytest.fixture
def tracker() -> BudgetTracker:
    return BudgetTracker()


class TestBudgetTable:
    """Tests for setting, reading and deleting limits."""

    def test_set_and_get(self, tracker):
        """Test set and get."""
        tracker.set_budget(FOOD, Decimal("100"))
        assert tracker.get_budget(FOOD) == Decimal("100")

    def test_set_overwrites(self, tracker):
        """Test set overwrites."""
        tracker.set_budget(FOOD, Decimal("100"))
        tracker.set_budget(FOOD, Decimal("50"))
        assert tracker.get_budget(FOOD) == Decimal("50")

    def test_unset_is_none(self, tracker):
        """Test unset is none."""
        assert tracker.get_budget(ExpenseCategory.RENT) is None

    def test_negative_limit_rejected(self, tracker):
        """Test negative limit rejected."""
        with pytest.raises(NegativeLimitError):
            tracker.set_budget(FOOD, Decimal("-1"))
        assert tracker.get_budget(FOOD) is None

    def test_non_finite_limit_rejected(self, tracker):
        """Test non-finite limit rejected."""
        with pytest.raises(NegativeLimitError):
            tracker.set_budget(FOOD, Decimal("Infinity"))

    def test_delete_returns_limit(self, tracker):
        """Test delete returns limit."""
        tracker.set_budget(FOOD, Decimal("100"))
        assert tracker.delete_budget(FOOD) == Decimal("100")
        assert tracker.get_budget(FOOD) is None

    def test_delete_twice(self, tracker):
        """Test delete twice."""
        tracker.set_budget(FOOD, Decimal("100"))
        tracker.delete_budget(FOOD)
        with pytest.raises(NoBudgetSetError, match="No budget has been set for FOOD."):
            tracker.delete_budget(FOOD)

    def test_view_is_read_only_and_ordered(self, tracker):
        """Test view is read only and ordered."""
        tracker.set_budget(ExpenseCategory.RENT, Decimal("800"))
        tracker.set_budget(FOOD, Decimal("100"))
        view = tracker.budgets_view()
        assert list(view) == [FOOD, ExpenseCategory.RENT]
        with pytest.raises(TypeError):
            view[FOOD] = Decimal("1")

    def test_ratio_must_be_a_fraction(self):
        """Test ratio must be a fraction."""
        with pytest.raises(ValueError):
            BudgetTracker(Decimal("1.5"))


class TestClassification:
    """Tests for normal / near / over classification."""

    def test_no_limit_is_normal(self, tracker):
        """Test no limit is normal."""
        assert tracker.classify(FOOD, Decimal("1000000")) is BudgetStatus.NORMAL

    @pytest.mark.parametrize(
        "total, expected",
        [
            ("0", BudgetStatus.NORMAL),
            ("89.99", BudgetStatus.NORMAL),
            ("90", BudgetStatus.NEAR_THRESHOLD),
            ("99.99", BudgetStatus.NEAR_THRESHOLD),
            ("100", BudgetStatus.OVER_LIMIT),
            ("170", BudgetStatus.OVER_LIMIT),
        ],
    )
    def test_thresholds(self, tracker, total, expected):
        """Test budget status classification thresholds."""
        tracker.set_budget(FOOD, Decimal("100"))
        assert tracker.classify(FOOD, Decimal(total)) is expected

    def test_zero_limit_any_spend_is_over(self, tracker):
        """Test zero limit any spend is over."""
        tracker.set_budget(FOOD, Decimal("0"))
        assert tracker.classify(FOOD, Decimal("0.01")) is BudgetStatus.OVER_LIMIT

    def test_custom_ratio(self):
        """Test custom ratio."""
        tracker = BudgetTracker(Decimal("0.5"))
        tracker.set_budget(FOOD, Decimal("100"))
        assert tracker.classify(FOOD, Decimal("50")) is BudgetStatus.NEAR_THRESHOLD


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
