"""
Ledger Store

Keeps records of one kind in newest-first order at all times.

ORDERING:
- Primary: date, newest first
- Ties: insertion order, most recently inserted first

Each stored record is paired with the sequence number it was inserted
under. Ordering is a pure function of (date, sequence), so a record that
is removed and then restored under its ORIGINAL sequence number lands
exactly where it was. Modify relies on this for rollback.

Visible indices are 1-based positions in the current ordering. They are
never stored on records; every call recomputes them.
"""

import itertools
from bisect import bisect_left
from decimal import Decimal
from typing import Generic, Iterator, NamedTuple, Optional, TypeVar

import structlog

from fintrack.errors import EmptyListError, IndexOutOfRangeError
from fintrack.models.records import (
    Expense,
    ExpenseCategory,
    Income,
    IncomeCategory,
    MoneyRecord,
    YearMonth,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T", Expense, Income)


class LedgerEntry(NamedTuple):
    """A stored record together with its insertion sequence number."""
    record: MoneyRecord
    sequence: int

    @property
    def sort_key(self) -> tuple[int, int]:
        # Ascending key == newest date first, then newest insertion first
        return (-self.record.date.toordinal(), -self.sequence)


class RecordLedger(Generic[T]):
    """
    Newest-first collection of one record type.

    Subclasses set record_type, category_type and label.
    """

    record_type: type
    category_type: type
    label: str

    def __init__(self):
        self._entries: list[LedgerEntry] = []
        self._keys: list[tuple[int, int]] = []
        self._sequence = itertools.count(1)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[T]:
        return iter(self.view())

    @property
    def is_empty(self) -> bool:
        return not self._entries

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def insert(self, record: T) -> LedgerEntry:
        """
        Store a record at its sorted position.

        Raises:
            TypeError: if record is not of this ledger's record type
        """
        if not isinstance(record, self.record_type):
            logger.warning(
                "wrong_record_type",
                ledger=self.label,
                got=type(record).__name__,
            )
            raise TypeError(
                f"{self.label.capitalize()} ledger cannot store {type(record).__name__}"
            )
        entry = LedgerEntry(record, next(self._sequence))
        position = self._place(entry)
        logger.debug(
            "record_inserted",
            ledger=self.label,
            date=record.date.isoformat(),
            position=position + 1,
            size=len(self._entries),
        )
        return entry

    def restore(self, entry: LedgerEntry) -> None:
        """Put back an entry previously returned by remove_entry."""
        position = self._place(entry)
        logger.debug(
            "record_restored",
            ledger=self.label,
            position=position + 1,
            size=len(self._entries),
        )

    def remove_entry(self, index: int) -> LedgerEntry:
        """Remove by visible index, keeping the sequence number for restore()."""
        position = self._position(index, "delete")
        del self._keys[position]
        entry = self._entries.pop(position)
        logger.debug(
            "record_removed",
            ledger=self.label,
            index=index,
            size=len(self._entries),
        )
        return entry

    def delete(self, index: int) -> T:
        """
        Delete the record at a 1-based visible index.

        Raises:
            EmptyListError: if the ledger is empty
            IndexOutOfRangeError: if index is not in 1..size
        """
        return self.remove_entry(index).record

    def _place(self, entry: LedgerEntry) -> int:
        key = entry.sort_key
        position = bisect_left(self._keys, key)
        self._keys.insert(position, key)
        self._entries.insert(position, entry)
        return position

    def _position(self, index: int, action: str) -> int:
        """Validate a 1-based visible index and turn it into a list position."""
        size = len(self._entries)
        if size == 0:
            logger.warning("empty_ledger", ledger=self.label, action=action)
            raise EmptyListError(
                f"Cannot {action} {self.label}: The {self.label} list is empty."
            )
        if not 1 <= index <= size:
            logger.warning(
                "index_out_of_range",
                ledger=self.label,
                index=index,
                size=size,
            )
            raise IndexOutOfRangeError(
                f"{self.label.capitalize()} index out of range. Valid range: 1 to {size}"
            )
        return index - 1

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get(self, index: int) -> T:
        """The record at a 1-based visible index. Same errors as delete()."""
        return self._entries[self._position(index, "access")].record

    def view(self) -> tuple[T, ...]:
        """Newest-first snapshot. Mutating the ledger later does not affect it."""
        return tuple(entry.record for entry in self._entries)

    def view_month(self, month: YearMonth) -> tuple[T, ...]:
        """Newest-first snapshot restricted to one month. Empty tuple if none match."""
        return tuple(
            entry.record for entry in self._entries if month.contains(entry.record.date)
        )

    def total(self, month: Optional[YearMonth] = None) -> Decimal:
        """Sum of all amounts, optionally within one month."""
        records = self.view() if month is None else self.view_month(month)
        return sum((record.amount for record in records), Decimal("0"))

    def total_for_category(self, category) -> Decimal:
        return sum(
            (e.record.amount for e in self._entries if e.record.category is category),
            Decimal("0"),
        )

    def totals_by_category(self, month: Optional[YearMonth] = None) -> dict:
        """
        {category: summed amount}, only for categories that have records.

        Categories appear in enum declaration order.
        """
        records = self.view() if month is None else self.view_month(month)
        sums: dict = {}
        for record in records:
            sums[record.category] = sums.get(record.category, Decimal("0")) + record.amount
        order = list(type(self).category_type)
        return {category: sums[category] for category in order if category in sums}

    def is_newest_first(self) -> bool:
        """True when stored order matches the ordering rule. For assertions and tests."""
        return all(a <= b for a, b in zip(self._keys, self._keys[1:]))


class ExpenseLedger(RecordLedger[Expense]):
    """Newest-first list of expenses."""
    record_type = Expense
    label = "expense"
    category_type = ExpenseCategory


class IncomeLedger(RecordLedger[Income]):
    """Newest-first list of incomes."""
    record_type = Income
    label = "income"
    category_type = IncomeCategory
