"""
Command parsing package.

Pure functions that turn command text into validated records and
primitives. Nothing in this package depends on ledger state.
"""

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
from fintrack.parsing.grammar import (
    AMOUNT_PREFIX,
    CATEGORY_PREFIX,
    DATE_PREFIX,
    DESCRIPTION_PREFIX,
    extract_fields,
    parse_amount,
    parse_date,
    parse_index,
    parse_limit,
    parse_month,
)

__all__ = [
    # Commands
    "ALIASES",
    "COMMAND_USAGES",
    "COMMANDS",
    "ensure_no_arguments",
    "expand_alias",
    "parse_add_expense",
    "parse_add_income",
    "parse_delete_budget",
    "parse_delete_index",
    "parse_export_path",
    "parse_modify_expense",
    "parse_modify_income",
    "parse_modify_index",
    "parse_optional_month",
    "parse_set_budget",
    "split_command",
    # Grammar
    "AMOUNT_PREFIX",
    "CATEGORY_PREFIX",
    "DATE_PREFIX",
    "DESCRIPTION_PREFIX",
    "extract_fields",
    "parse_amount",
    "parse_date",
    "parse_index",
    "parse_limit",
    "parse_month",
]
