"""
Error Taxonomy for FinTrack

Every failure the ledger core can report is one of the kinds below.
Each kind has its own exception class so callers can catch exactly
what they care about, and each instance carries:
- kind: the ErrorKind tag (stable, machine readable)
- message: a human-readable explanation suitable for showing to the user

DESIGN DECISION: Errors are raised at the point of first detection.
Nothing in the core catches one of these to retry or to "fix" input.
The only operation that unwinds state before re-raising is modify,
and it re-raises the ORIGINAL error, never a wrapper.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Tags for every distinct failure the core can report."""
    # Command grammar
    MISSING_FIELD = "missing_field"
    DUPLICATE_FIELD = "duplicate_field"
    UNRECOGNIZED_FIELD = "unrecognized_field"
    PREAMBLE_TEXT = "preamble_text"
    TRAILING_TEXT = "trailing_text"
    DESCRIPTION_MISPLACED = "description_misplaced"

    # Values
    MALFORMED_NUMBER = "malformed_number"
    NON_FINITE_NUMBER = "non_finite_number"
    NON_POSITIVE_AMOUNT = "non_positive_amount"
    NEGATIVE_LIMIT = "negative_limit"
    MALFORMED_DATE = "malformed_date"
    INVALID_CALENDAR_DATE = "invalid_calendar_date"
    FUTURE_DATE = "future_date"
    MALFORMED_INDEX = "malformed_index"
    INDEX_TOO_LARGE = "index_too_large"
    INDEX_TOO_SMALL = "index_too_small"
    UNKNOWN_CATEGORY = "unknown_category"
    INVALID_FILE_PATH = "invalid_file_path"
    UNSUPPORTED_CHARACTERS = "unsupported_characters"
    UNKNOWN_COMMAND = "unknown_command"

    # Ledger state
    EMPTY_LIST = "empty_list"
    INDEX_OUT_OF_RANGE = "index_out_of_range"
    NO_BUDGET_SET = "no_budget_set"


class FinTrackError(Exception):
    """Base exception for everything the ledger core reports."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# =============================================================================
# PARSER ERRORS
# =============================================================================

class ParseError(FinTrackError):
    """Raised when command text cannot be turned into a valid value."""
    pass


class MissingFieldError(ParseError):
    kind = ErrorKind.MISSING_FIELD


class DuplicateFieldError(ParseError):
    kind = ErrorKind.DUPLICATE_FIELD


class UnrecognizedFieldError(ParseError):
    kind = ErrorKind.UNRECOGNIZED_FIELD


class PreambleTextError(ParseError):
    """Text appeared before the first field prefix."""
    kind = ErrorKind.PREAMBLE_TEXT


class TrailingTextError(ParseError):
    """Text was left over after every expected argument was consumed."""
    kind = ErrorKind.TRAILING_TEXT


class DescriptionMisplacedError(ParseError):
    kind = ErrorKind.DESCRIPTION_MISPLACED


class MalformedNumberError(ParseError):
    kind = ErrorKind.MALFORMED_NUMBER


class NonFiniteNumberError(ParseError):
    """NaN or +/-Infinity. Distinct from a value that is not a number at all."""
    kind = ErrorKind.NON_FINITE_NUMBER


class NonPositiveAmountError(ParseError):
    kind = ErrorKind.NON_POSITIVE_AMOUNT


class NegativeLimitError(ParseError):
    kind = ErrorKind.NEGATIVE_LIMIT


class MalformedDateError(ParseError):
    kind = ErrorKind.MALFORMED_DATE


class InvalidCalendarDateError(ParseError):
    """Well-formed YYYY-MM-DD text naming a day that does not exist."""
    kind = ErrorKind.INVALID_CALENDAR_DATE


class FutureDateError(ParseError):
    kind = ErrorKind.FUTURE_DATE


class MalformedIndexError(ParseError):
    kind = ErrorKind.MALFORMED_INDEX


class IndexTooLargeError(ParseError):
    kind = ErrorKind.INDEX_TOO_LARGE


class IndexTooSmallError(ParseError):
    kind = ErrorKind.INDEX_TOO_SMALL


class UnknownCategoryError(ParseError):
    kind = ErrorKind.UNKNOWN_CATEGORY


class InvalidFilePathError(ParseError):
    kind = ErrorKind.INVALID_FILE_PATH


class UnsupportedCharactersError(ParseError):
    kind = ErrorKind.UNSUPPORTED_CHARACTERS


class UnknownCommandError(ParseError):
    kind = ErrorKind.UNKNOWN_COMMAND


# =============================================================================
# LEDGER ERRORS
# =============================================================================

class LedgerError(FinTrackError):
    """Raised when a well-formed request does not fit the current ledger state."""
    pass


class EmptyListError(LedgerError):
    kind = ErrorKind.EMPTY_LIST


class IndexOutOfRangeError(LedgerError):
    kind = ErrorKind.INDEX_OUT_OF_RANGE


class NoBudgetSetError(LedgerError):
    kind = ErrorKind.NO_BUDGET_SET
