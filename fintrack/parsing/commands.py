"""
Command Parsers

One function per command that takes arguments. Each takes the argument
text (keyword already removed) and returns a validated record or
primitive, or raises exactly one FinTrackError.

IMPORTANT: These functions never touch the ledger. Modify parsers receive
the record being replaced from the caller and merge onto it; they do not
look it up themselves.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional

from fintrack.errors import (
    InvalidFilePathError,
    MissingFieldError,
    TrailingTextError,
)
from fintrack.models.records import (
    Expense,
    ExpenseCategory,
    Income,
    IncomeCategory,
    YearMonth,
)
from fintrack.parsing.grammar import (
    AMOUNT_PREFIX,
    CATEGORY_PREFIX,
    DATE_PREFIX,
    DESCRIPTION_PREFIX,
    RECORD_PREFIXES,
    extract_fields,
    parse_amount,
    parse_date,
    parse_index,
    parse_limit,
    parse_month,
    split_positional,
)


# Commands
HELP_COMMAND = "help"
ADD_EXPENSE_COMMAND = "add-expense"
ADD_INCOME_COMMAND = "add-income"
DELETE_EXPENSE_COMMAND = "delete-expense"
DELETE_INCOME_COMMAND = "delete-income"
MODIFY_EXPENSE_COMMAND = "modify-expense"
MODIFY_INCOME_COMMAND = "modify-income"
LIST_EXPENSE_COMMAND = "list-expense"
LIST_INCOME_COMMAND = "list-income"
BALANCE_COMMAND = "balance"
BUDGET_COMMAND = "budget"
DELETE_BUDGET_COMMAND = "delete-budget"
LIST_BUDGET_COMMAND = "list-budget"
SUMMARY_EXPENSE_COMMAND = "summary-expense"
SUMMARY_INCOME_COMMAND = "summary-income"
EXPORT_COMMAND = "export"
EXIT_COMMAND = "bye"

COMMANDS = (
    HELP_COMMAND,
    ADD_EXPENSE_COMMAND,
    ADD_INCOME_COMMAND,
    DELETE_EXPENSE_COMMAND,
    DELETE_INCOME_COMMAND,
    MODIFY_EXPENSE_COMMAND,
    MODIFY_INCOME_COMMAND,
    LIST_EXPENSE_COMMAND,
    LIST_INCOME_COMMAND,
    BALANCE_COMMAND,
    BUDGET_COMMAND,
    DELETE_BUDGET_COMMAND,
    LIST_BUDGET_COMMAND,
    SUMMARY_EXPENSE_COMMAND,
    SUMMARY_INCOME_COMMAND,
    EXPORT_COMMAND,
    EXIT_COMMAND,
)

# Abbreviation -> canonical keyword. Canonical keywords map to themselves.
ALIASES: dict[str, str] = {
    "h": HELP_COMMAND,
    "ae": ADD_EXPENSE_COMMAND,
    "ai": ADD_INCOME_COMMAND,
    "de": DELETE_EXPENSE_COMMAND,
    "di": DELETE_INCOME_COMMAND,
    "me": MODIFY_EXPENSE_COMMAND,
    "mi": MODIFY_INCOME_COMMAND,
    "le": LIST_EXPENSE_COMMAND,
    "li": LIST_INCOME_COMMAND,
    "bal": BALANCE_COMMAND,
    "b": BUDGET_COMMAND,
    "db": DELETE_BUDGET_COMMAND,
    "lb": LIST_BUDGET_COMMAND,
    "se": SUMMARY_EXPENSE_COMMAND,
    "si": SUMMARY_INCOME_COMMAND,
    "ex": EXPORT_COMMAND,
    "exit": EXIT_COMMAND,
}

ADD_EXPENSE_USAGE = (
    f"Usage: {ADD_EXPENSE_COMMAND} a/<amount> c/<category> d/<YYYY-MM-DD> [des/<description>]"
)
ADD_INCOME_USAGE = (
    f"Usage: {ADD_INCOME_COMMAND} a/<amount> c/<category> d/<YYYY-MM-DD> [des/<description>]"
)
MODIFY_EXPENSE_USAGE = (
    f"Usage: {MODIFY_EXPENSE_COMMAND} <index> [a/<amount>] [c/<category>] "
    "[d/<YYYY-MM-DD>] [des/<description>]"
)
MODIFY_INCOME_USAGE = (
    f"Usage: {MODIFY_INCOME_COMMAND} <index> [a/<amount>] [c/<category>] "
    "[d/<YYYY-MM-DD>] [des/<description>]"
)
BUDGET_USAGE = f"Usage: {BUDGET_COMMAND} c/<category> a/<amount>"
DELETE_BUDGET_USAGE = f"Usage: {DELETE_BUDGET_COMMAND} c/<category>"
EXPORT_USAGE = f"Usage: {EXPORT_COMMAND} <filepath>"
MISSING_PARAMETERS = "Missing parameters. See 'help'."

# Shown by 'help', in display order
COMMAND_USAGES: dict[str, str] = {
    HELP_COMMAND: f"Usage: {HELP_COMMAND}",
    ADD_EXPENSE_COMMAND: ADD_EXPENSE_USAGE,
    ADD_INCOME_COMMAND: ADD_INCOME_USAGE,
    DELETE_EXPENSE_COMMAND: f"Usage: {DELETE_EXPENSE_COMMAND} <index>",
    DELETE_INCOME_COMMAND: f"Usage: {DELETE_INCOME_COMMAND} <index>",
    MODIFY_EXPENSE_COMMAND: MODIFY_EXPENSE_USAGE,
    MODIFY_INCOME_COMMAND: MODIFY_INCOME_USAGE,
    LIST_EXPENSE_COMMAND: f"Usage: {LIST_EXPENSE_COMMAND} [d/YYYY-MM]",
    LIST_INCOME_COMMAND: f"Usage: {LIST_INCOME_COMMAND} [d/YYYY-MM]",
    BALANCE_COMMAND: f"Usage: {BALANCE_COMMAND} [d/YYYY-MM]",
    BUDGET_COMMAND: BUDGET_USAGE,
    DELETE_BUDGET_COMMAND: DELETE_BUDGET_USAGE,
    LIST_BUDGET_COMMAND: f"Usage: {LIST_BUDGET_COMMAND}",
    SUMMARY_EXPENSE_COMMAND: f"Usage: {SUMMARY_EXPENSE_COMMAND}",
    SUMMARY_INCOME_COMMAND: f"Usage: {SUMMARY_INCOME_COMMAND}",
    EXPORT_COMMAND: EXPORT_USAGE,
    EXIT_COMMAND: f"Usage: {EXIT_COMMAND}",
}

_REQUIRED_RECORD_FIELDS = (AMOUNT_PREFIX, CATEGORY_PREFIX, DATE_PREFIX)


# =============================================================================
# KEYWORDS
# =============================================================================

def expand_alias(keyword: str) -> str:
    """Rewrite an abbreviated keyword to its canonical form. Idempotent."""
    normalized = keyword.strip().lower()
    return ALIASES.get(normalized, normalized)


def split_command(line: str) -> tuple[str, str]:
    """
    Separate the command keyword from its arguments.

    The keyword is alias-expanded. The arguments are returned with leading
    whitespace removed and everything else untouched.
    """
    keyword, args = split_positional(line)
    return expand_alias(keyword), args


def ensure_no_arguments(keyword: str, args: str) -> None:
    """Commands such as 'help' and 'list-budget' take nothing after the keyword."""
    if args.strip():
        raise TrailingTextError(
            f"The '{keyword}' command does not take additional arguments."
        )


# =============================================================================
# RECORDS
# =============================================================================

def _require_arguments(args: str) -> None:
    if not args.strip():
        raise MissingFieldError(MISSING_PARAMETERS)


def parse_add_expense(
    args: str,
    *,
    allow_future: bool = False,
    today: Optional[date] = None,
) -> Expense:
    """
    Expected format:
        a/<amount> c/<category> d/<YYYY-MM-DD> [des/<text>]
    in any order, with des/ last when present.
    """
    _require_arguments(args)
    fields = extract_fields(
        args,
        accepted=RECORD_PREFIXES,
        required=_REQUIRED_RECORD_FIELDS,
        usage=ADD_EXPENSE_USAGE,
    )
    return Expense(
        amount=parse_amount(fields[AMOUNT_PREFIX]),
        category=ExpenseCategory.parse(fields[CATEGORY_PREFIX]),
        date=parse_date(fields[DATE_PREFIX], allow_future=allow_future, today=today),
        description=fields.get(DESCRIPTION_PREFIX),
    )


def parse_add_income(
    args: str,
    *,
    allow_future: bool = False,
    today: Optional[date] = None,
) -> Income:
    """
    Expected format:
        a/<amount> c/<category> d/<YYYY-MM-DD> [des/<text>]
    in any order, with des/ last when present.
    """
    _require_arguments(args)
    fields = extract_fields(
        args,
        accepted=RECORD_PREFIXES,
        required=_REQUIRED_RECORD_FIELDS,
        usage=ADD_INCOME_USAGE,
    )
    return Income(
        amount=parse_amount(fields[AMOUNT_PREFIX]),
        category=IncomeCategory.parse(fields[CATEGORY_PREFIX]),
        date=parse_date(fields[DATE_PREFIX], allow_future=allow_future, today=today),
        description=fields.get(DESCRIPTION_PREFIX),
    )


def parse_modify_index(args: str, label: str) -> int:
    """
    Index at the front of a modify command: "<index> [fields...]".

    Args:
        label: "Expense" or "Income", used in messages.
    """
    token, _ = split_positional(args)
    if not token:
        command = MODIFY_EXPENSE_COMMAND if label == "Expense" else MODIFY_INCOME_COMMAND
        raise MissingFieldError(
            f"Missing {label.lower()} index. Usage: {command} <index> [fields...]"
        )
    return parse_index(token, label)


def _merge_fields(
    rest: str,
    usage: str,
    allow_future: bool,
    today: Optional[date],
) -> dict:
    """Typed values for only the fields the user supplied."""
    fields = extract_fields(rest, accepted=RECORD_PREFIXES, usage=usage)
    updates = {}
    if AMOUNT_PREFIX in fields:
        updates["amount"] = parse_amount(fields[AMOUNT_PREFIX])
    if CATEGORY_PREFIX in fields:
        updates["category"] = fields[CATEGORY_PREFIX]
    if DATE_PREFIX in fields:
        updates["date"] = parse_date(
            fields[DATE_PREFIX], allow_future=allow_future, today=today
        )
    if DESCRIPTION_PREFIX in fields:
        updates["description"] = fields[DESCRIPTION_PREFIX]
    return updates


def parse_modify_expense(
    args: str,
    old: Expense,
    *,
    allow_future: bool = False,
    today: Optional[date] = None,
) -> Expense:
    """
    Build the replacement for old from "<index> [a/] [c/] [d/] [des/]".

    Omitted fields keep old's values. The index is validated but not used;
    the caller is responsible for having fetched old by that same index.
    """
    parse_modify_index(args, "Expense")
    _, rest = split_positional(args)
    updates = _merge_fields(rest, MODIFY_EXPENSE_USAGE, allow_future, today)
    if "category" in updates:
        updates["category"] = ExpenseCategory.parse(updates["category"])
    return Expense(
        amount=updates.get("amount", old.amount),
        category=updates.get("category", old.category),
        date=updates.get("date", old.date),
        description=updates.get("description", old.description),
    )


def parse_modify_income(
    args: str,
    old: Income,
    *,
    allow_future: bool = False,
    today: Optional[date] = None,
) -> Income:
    """Income counterpart of parse_modify_expense."""
    parse_modify_index(args, "Income")
    _, rest = split_positional(args)
    updates = _merge_fields(rest, MODIFY_INCOME_USAGE, allow_future, today)
    if "category" in updates:
        updates["category"] = IncomeCategory.parse(updates["category"])
    return Income(
        amount=updates.get("amount", old.amount),
        category=updates.get("category", old.category),
        date=updates.get("date", old.date),
        description=updates.get("description", old.description),
    )


def parse_delete_index(args: str, label: str) -> int:
    """
    Index for delete-expense / delete-income.

    Args:
        label: "Expense" or "Income", used in messages.
    """
    command = DELETE_EXPENSE_COMMAND if label == "Expense" else DELETE_INCOME_COMMAND
    token, rest = split_positional(args)
    if not token:
        raise MissingFieldError(
            f"Missing {label.lower()} index. Usage: {command} <index>"
        )
    if rest.strip():
        raise TrailingTextError(
            f"Unexpected text after the index: '{rest.strip()}'. Usage: {command} <index>"
        )
    return parse_index(token, label)


# =============================================================================
# FILTERS, BUDGETS, EXPORT
# =============================================================================

def parse_optional_month(args: str, keyword: str) -> Optional[YearMonth]:
    """
    Optional d/YYYY-MM filter for list-expense, list-income and balance.

    Returns None when no filter was given.
    """
    if not args.strip():
        return None
    usage = f"Usage: {keyword} [d/YYYY-MM]"
    fields = extract_fields(
        args,
        accepted=(DATE_PREFIX,),
        required=(DATE_PREFIX,),
        usage=usage,
    )
    return parse_month(fields[DATE_PREFIX])


def parse_set_budget(args: str) -> tuple[ExpenseCategory, Decimal]:
    """Expected format: c/<category> a/<amount>, in either order."""
    if not args.strip():
        raise MissingFieldError(f"Missing parameters for budget command. {BUDGET_USAGE}")
    fields = extract_fields(
        args,
        accepted=(CATEGORY_PREFIX, AMOUNT_PREFIX),
        required=(CATEGORY_PREFIX, AMOUNT_PREFIX),
        usage=BUDGET_USAGE,
    )
    category = ExpenseCategory.parse(fields[CATEGORY_PREFIX])
    return category, parse_limit(fields[AMOUNT_PREFIX])


def parse_delete_budget(args: str) -> ExpenseCategory:
    """Expected format: c/<category>"""
    if not args.strip():
        raise MissingFieldError(
            f"Missing parameters for delete-budget command. {DELETE_BUDGET_USAGE}"
        )
    fields = extract_fields(
        args,
        accepted=(CATEGORY_PREFIX,),
        required=(CATEGORY_PREFIX,),
        usage=DELETE_BUDGET_USAGE,
    )
    return ExpenseCategory.parse(fields[CATEGORY_PREFIX])


def parse_export_path(args: str, default_suffix: str = ".csv") -> Path:
    """
    Destination file for export.

    The path is only checked, never touched: control characters are
    rejected and a missing suffix gets default_suffix appended.
    """
    text = args.strip()
    if not text:
        raise MissingFieldError(f"Missing file path. {EXPORT_USAGE}")
    if any(ord(ch) < 32 or ord(ch) == 127 for ch in text):
        raise InvalidFilePathError(
            "Invalid file path. Please provide a valid path for the CSV file."
        )

    path = Path(text)
    if path.name in ("", ".", ".."):
        raise InvalidFilePathError(
            "Invalid file path. Please provide a valid path for the CSV file."
        )
    if not path.suffix:
        path = path.with_name(path.name + default_suffix)
    return path
