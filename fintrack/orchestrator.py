"""
Main Orchestrator for FinTrack

This module ties together all the components and defines the
end-to-end flow for one line of user input:
    text -> keyword + args -> parse -> ledger operation -> CommandResult

DESIGN DECISION: The orchestrator enforces the boundaries:
- Parsing never sees ledger state, except the record a modify merges onto
- The ledger never sees raw text
- Every command is audited, accepted or rejected
- Nothing here renders text or reads input; the caller owns presentation

A FinTrackError raised anywhere in a command becomes an error result.
Any other exception is a programming error and propagates.
"""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from fintrack.audit import AuditLogger, configure_log_level, create_correlation_id
from fintrack.config import InputSettings, Settings, get_settings
from fintrack.errors import (
    ErrorKind,
    FinTrackError,
    UnknownCommandError,
    UnsupportedCharactersError,
)
from fintrack.ledger import FinanceManager
from fintrack.models.audit import AuditEventBuilder
from fintrack.models.records import (
    BalanceReport,
    BudgetStatus,
    Category,
    CategorySummary,
    Expense,
    ExpenseCategory,
    Income,
    LedgerSnapshot,
    YearMonth,
)
from fintrack.parsing import commands
from fintrack.parsing.commands import (
    COMMAND_USAGES,
    ensure_no_arguments,
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

UNSUPPORTED_CHARACTERS_MESSAGE = (
    "Unsupported characters detected. Please use standard ASCII text only."
)
UNKNOWN_COMMAND_MESSAGE = "Invalid command. Type 'help' for a list of available commands."


class CommandResult(BaseModel):
    """
    Outcome of one command.

    Only the fields relevant to the command are filled in. On failure,
    success is False and error_kind/error_message describe why; no
    ledger state was changed.
    """
    model_config = ConfigDict(frozen=True)

    keyword: str
    correlation_id: UUID
    success: bool = True

    # Records
    record: Optional[Union[Expense, Income]] = None
    index: Optional[int] = Field(default=None, description="Visible index the command acted on")
    records: tuple[Union[Expense, Income], ...] = ()
    month: Optional[YearMonth] = None

    # Budgets
    category: Optional[Category] = None
    budget_status: Optional[BudgetStatus] = None
    category_total: Optional[Decimal] = None
    budget_limit: Optional[Decimal] = None
    budgets: dict[ExpenseCategory, Decimal] = Field(default_factory=dict)

    # Reports
    summary: Optional[CategorySummary] = None
    balance: Optional[BalanceReport] = None
    help_lines: tuple[str, ...] = ()

    # Export
    export_path: Optional[Path] = None
    snapshot: Optional[LedgerSnapshot] = None

    # Errors
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    should_exit: bool = False


class CommandFlow:
    """
    Orchestrates one command from text to result.

    Flow:
    1. Split keyword from args, expand aliases
    2. Apply the input character policy
    3. Parse args into records or primitives
    4. Run the ledger operation
    5. Audit and return a CommandResult
    """

    def __init__(
        self,
        manager: Optional[FinanceManager] = None,
        audit_logger: Optional[AuditLogger] = None,
        input_settings: Optional[InputSettings] = None,
        today: Optional[Callable[[], date]] = None,
    ):
        self._manager = manager or FinanceManager()
        self._audit_logger = audit_logger or AuditLogger()
        self._input = input_settings or get_settings().input
        self._today = today or date.today

        self._handlers: dict[str, Callable[[str, str, UUID], CommandResult]] = {
            commands.HELP_COMMAND: self._help,
            commands.ADD_EXPENSE_COMMAND: self._add_expense,
            commands.ADD_INCOME_COMMAND: self._add_income,
            commands.DELETE_EXPENSE_COMMAND: self._delete_expense,
            commands.DELETE_INCOME_COMMAND: self._delete_income,
            commands.MODIFY_EXPENSE_COMMAND: self._modify_expense,
            commands.MODIFY_INCOME_COMMAND: self._modify_income,
            commands.LIST_EXPENSE_COMMAND: self._list_expense,
            commands.LIST_INCOME_COMMAND: self._list_income,
            commands.BALANCE_COMMAND: self._balance,
            commands.BUDGET_COMMAND: self._set_budget,
            commands.DELETE_BUDGET_COMMAND: self._delete_budget,
            commands.LIST_BUDGET_COMMAND: self._list_budget,
            commands.SUMMARY_EXPENSE_COMMAND: self._summary_expense,
            commands.SUMMARY_INCOME_COMMAND: self._summary_income,
            commands.EXPORT_COMMAND: self._export,
            commands.EXIT_COMMAND: self._exit,
        }

    @property
    def manager(self) -> FinanceManager:
        return self._manager

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    def execute(self, line: str) -> CommandResult:
        """
        Run one line of user input.

        Returns:
            A CommandResult. Rejected input never raises; it comes back
            with success=False.
        """
        correlation_id = create_correlation_id()
        keyword, args = split_command(line)
        self._audit_logger.log_command_received(keyword, correlation_id)

        try:
            if self._input.ascii_only and not line.isascii():
                raise UnsupportedCharactersError(UNSUPPORTED_CHARACTERS_MESSAGE)
            handler = self._handlers.get(keyword)
            if handler is None:
                raise UnknownCommandError(UNKNOWN_COMMAND_MESSAGE)
            return handler(keyword, args, correlation_id)
        except FinTrackError as e:
            self._audit_logger.log_command_rejected(
                keyword=keyword,
                error_kind=e.kind.value,
                error_message=e.message,
                correlation_id=correlation_id,
            )
            return CommandResult(
                keyword=keyword,
                correlation_id=correlation_id,
                success=False,
                error_kind=e.kind,
                error_message=e.message,
            )

    # =========================================================================
    # RECORDS
    # =========================================================================

    def _add_expense(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        expense = parse_add_expense(
            args,
            allow_future=self._input.allow_future_dates,
            today=self._today(),
        )
        result = self._manager.add_expense(expense)
        self._audit_logger.log_record_added(expense, correlation_id)
        self._audit_logger.log_budget_status(result, correlation_id)
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            record=expense,
            category=expense.category,
            budget_status=result.budget_status,
            category_total=result.category_total,
            budget_limit=result.budget_limit,
        )

    def _add_income(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        income = parse_add_income(
            args,
            allow_future=self._input.allow_future_dates,
            today=self._today(),
        )
        self._manager.add_income(income)
        self._audit_logger.log_record_added(income, correlation_id)
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            record=income,
            category=income.category,
        )

    def _delete_expense(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        index = parse_delete_index(args, "Expense")
        removed = self._manager.delete_expense(index)
        self._audit_logger.log_record_deleted(removed, index, correlation_id)
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            record=removed,
            index=index,
        )

    def _delete_income(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        index = parse_delete_index(args, "Income")
        removed = self._manager.delete_income(index)
        self._audit_logger.log_record_deleted(removed, index, correlation_id)
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            record=removed,
            index=index,
        )

    def _modify_expense(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        index = parse_modify_index(args, "Expense")
        # Index errors surface here, before anything is removed
        self._manager.get_expense(index)
        today = self._today()

        try:
            result = self._manager.modify_expense(
                index,
                lambda old: parse_modify_expense(
                    args, old, allow_future=self._input.allow_future_dates, today=today
                ),
            )
        except FinTrackError as e:
            self._audit_logger.log_modify_rolled_back(
                entity_type="expense",
                index=index,
                error_kind=e.kind.value,
                error_message=e.message,
                correlation_id=correlation_id,
            )
            raise

        self._audit_logger.log_record_modified(index, result.record, correlation_id)
        self._audit_logger.log_budget_status(result, correlation_id)
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            record=result.record,
            index=index,
            category=result.record.category,
            budget_status=result.budget_status,
            category_total=result.category_total,
            budget_limit=result.budget_limit,
        )

    def _modify_income(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        index = parse_modify_index(args, "Income")
        self._manager.get_income(index)
        today = self._today()

        try:
            income = self._manager.modify_income(
                index,
                lambda old: parse_modify_income(
                    args, old, allow_future=self._input.allow_future_dates, today=today
                ),
            )
        except FinTrackError as e:
            self._audit_logger.log_modify_rolled_back(
                entity_type="income",
                index=index,
                error_kind=e.kind.value,
                error_message=e.message,
                correlation_id=correlation_id,
            )
            raise

        self._audit_logger.log_record_modified(index, income, correlation_id)
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            record=income,
            index=index,
            category=income.category,
        )

    def _list_expense(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        month = parse_optional_month(args, keyword)
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            records=self._manager.expenses_view(month),
            month=month,
        )

    def _list_income(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        month = parse_optional_month(args, keyword)
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            records=self._manager.incomes_view(month),
            month=month,
        )

    # =========================================================================
    # REPORTS
    # =========================================================================

    def _balance(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        month = parse_optional_month(args, keyword)
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            month=month,
            balance=self._manager.balance_report(month),
        )

    def _summary_expense(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        ensure_no_arguments(keyword, args)
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            summary=self._manager.summarize_expenses(),
        )

    def _summary_income(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        ensure_no_arguments(keyword, args)
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            summary=self._manager.summarize_incomes(),
        )

    # =========================================================================
    # BUDGETS
    # =========================================================================

    def _set_budget(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        category, limit = parse_set_budget(args)
        self._manager.set_budget(category, limit)
        self._audit_logger.log(
            AuditEventBuilder.budget_set(category.value, limit, correlation_id)
        )
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            category=category,
            budget_limit=limit,
            category_total=self._manager.category_total(category),
        )

    def _delete_budget(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        category = parse_delete_budget(args)
        limit = self._manager.delete_budget(category)
        self._audit_logger.log(
            AuditEventBuilder.budget_deleted(category.value, correlation_id)
        )
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            category=category,
            budget_limit=limit,
        )

    def _list_budget(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        ensure_no_arguments(keyword, args)
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            budgets=dict(self._manager.budgets_view()),
        )

    # =========================================================================
    # SESSION
    # =========================================================================

    def _help(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        ensure_no_arguments(keyword, args)
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            help_lines=tuple(COMMAND_USAGES.values()),
        )

    def _export(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        """
        Validate the destination and hand back a snapshot.

        Writing the file is the caller's job; the core performs no I/O.
        """
        path = parse_export_path(args, default_suffix=self._input.export_suffix)
        self._audit_logger.log(
            AuditEventBuilder.export_requested(str(path), correlation_id)
        )
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            export_path=path,
            snapshot=self._manager.snapshot(),
        )

    def _exit(self, keyword: str, args: str, correlation_id: UUID) -> CommandResult:
        ensure_no_arguments(keyword, args)
        return CommandResult(
            keyword=keyword,
            correlation_id=correlation_id,
            should_exit=True,
        )


def create_app_components(
    settings: Optional[Settings] = None,
) -> tuple[CommandFlow, FinanceManager, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to wire from. Defaults to get_settings().

    Returns:
        (command_flow, finance_manager, audit_logger)
    """
    settings = settings or get_settings()
    configure_log_level(settings.app.log_level)
    ledger_settings = settings.ledger
    audit_settings = settings.audit

    manager = FinanceManager(near_threshold_ratio=ledger_settings.near_threshold_ratio)
    audit_logger = AuditLogger(
        max_events=audit_settings.max_events,
        enabled=audit_settings.enabled,
    )
    flow = CommandFlow(
        manager=manager,
        audit_logger=audit_logger,
        input_settings=settings.input,
    )
    return flow, manager, audit_logger
