"""
Command Grammar

Turns free-order, prefix-tagged argument text into raw field values and
turns raw field values into typed primitives.

THE GRAMMAR:
- A field starts with a short prefix (a/, c/, d/, des/).
- A prefix only counts at the start of the text or right after whitespace,
  so "a/5c/food" is ONE amount field whose value is "5c/food".
- A value runs to the next prefix or to the end of the text, trimmed.
- des/ is special: it swallows the rest of the text verbatim. It is the
  only field allowed to contain prefix-looking text.

Validation happens in two stages, like everything else in FinTrack:

STAGE 1 - STRUCTURE (extract_fields):
- text before the first prefix
- prefixes the command does not accept
- duplicate fields
- a description that swallowed fields it should not have
- required fields that are absent or empty

STAGE 2 - VALUES (parse_amount, parse_date, parse_month, parse_index):
- numbers that are not numbers, or not finite
- amounts that are not positive, limits that are negative
- dates that are malformed, do not exist, or lie in the future
- indices that are malformed or outside platform integer bounds

Every function here is pure. No module state is read or written.
"""

import re
from collections.abc import Collection
from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from fintrack.errors import (
    DescriptionMisplacedError,
    DuplicateFieldError,
    FutureDateError,
    IndexTooLargeError,
    IndexTooSmallError,
    InvalidCalendarDateError,
    MalformedDateError,
    MalformedIndexError,
    MalformedNumberError,
    MissingFieldError,
    NegativeLimitError,
    NonFiniteNumberError,
    NonPositiveAmountError,
    PreambleTextError,
    UnrecognizedFieldError,
)
from fintrack.models.records import YearMonth

logger = structlog.get_logger(__name__)


# Parameter prefixes
AMOUNT_PREFIX = "a/"
CATEGORY_PREFIX = "c/"
DATE_PREFIX = "d/"
DESCRIPTION_PREFIX = "des/"

RECORD_PREFIXES = (AMOUNT_PREFIX, CATEGORY_PREFIX, DATE_PREFIX, DESCRIPTION_PREFIX)

# Indices are bounded like a signed 32-bit integer
INDEX_MAX = 2**31 - 1
INDEX_MIN = -(2**31)

# Largest decimal exponent a double can hold
MAX_NUMBER_EXPONENT = 308

_PREFIX_TOKEN = re.compile(r"(?:^|(?<=\s))([A-Za-z]+/)")
_NON_FINITE = {"nan", "snan", "inf", "infinity"}
_NUMBER_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_DATE_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")
_MONTH_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})")
_INDEX_PATTERN = re.compile(r"[+-]?[0-9]+")

DESCRIPTION_MISPLACED_MESSAGE = (
    f"Description ({DESCRIPTION_PREFIX}) must be the last parameter."
)


# =============================================================================
# STAGE 1 - STRUCTURE
# =============================================================================

def find_prefix(text: str, prefix: str, start: int = 0) -> int:
    """
    Index of the first occurrence of prefix at a word boundary.

    Returns -1 when the prefix does not occur at a boundary at or after start.
    """
    index = text.find(prefix, start)
    while index >= 0:
        if index == 0 or text[index - 1].isspace():
            return index
        index = text.find(prefix, index + 1)
    return -1


def scan_prefixes(text: str) -> list[tuple[int, str]]:
    """All prefix-shaped tokens ("letters/") at word boundaries, in order."""
    return [(m.start(1), m.group(1)) for m in _PREFIX_TOKEN.finditer(text)]


def extract_fields(
    args: str,
    *,
    accepted: Collection[str],
    required: Collection[str] = (),
    usage: str,
) -> dict[str, str]:
    """
    Split argument text into {prefix: value}.

    Args:
        args: Argument text with the command keyword already removed.
        accepted: Prefixes this command understands.
        required: Prefixes that must be present with a non-empty value.
        usage: Usage line appended to error messages.

    Returns:
        Non-empty field values keyed by prefix. A field given with an
        empty value is treated as absent.

    Raises:
        PreambleTextError, UnrecognizedFieldError, DuplicateFieldError,
        DescriptionMisplacedError, MissingFieldError
    """
    desc_at = -1
    if DESCRIPTION_PREFIX in accepted:
        desc_at = find_prefix(args, DESCRIPTION_PREFIX)

    head = args if desc_at < 0 else args[:desc_at]
    tail = None if desc_at < 0 else args[desc_at + len(DESCRIPTION_PREFIX):]

    tokens = scan_prefixes(head)

    first_at = tokens[0][0] if tokens else len(head)
    preamble = head[:first_at].strip()
    if preamble:
        logger.warning("preamble_text", preamble=preamble)
        raise PreambleTextError(
            f"Unexpected text before the first parameter: '{preamble}'. {usage}"
        )

    fields: dict[str, str] = {}
    seen: set[str] = set()
    for position, (start, token) in enumerate(tokens):
        if token not in accepted:
            logger.warning("unrecognized_field", token=token)
            raise UnrecognizedFieldError(f"Unrecognized parameter '{token}'. {usage}")
        if token in seen:
            raise DuplicateFieldError(
                f"Parameter '{token}' was given more than once. {usage}"
            )
        seen.add(token)

        end = tokens[position + 1][0] if position + 1 < len(tokens) else len(head)
        value = head[start + len(token):end].strip()
        if value:
            fields[token] = value

    if tail is not None:
        for prefix in accepted:
            if prefix == DESCRIPTION_PREFIX or prefix in seen:
                continue
            if find_prefix(tail, prefix) >= 0:
                raise DescriptionMisplacedError(DESCRIPTION_MISPLACED_MESSAGE)
        description = tail.strip()
        if description:
            fields[DESCRIPTION_PREFIX] = description

    missing = [p for p in required if p not in fields]
    if missing:
        raise MissingFieldError(
            f"Missing required field(s): {', '.join(missing)}. {usage}"
        )

    return fields


def split_positional(args: str) -> tuple[str, str]:
    """Split off the first whitespace-delimited token: ("3", "a/5 c/food")."""
    parts = args.strip().split(maxsplit=1)
    if not parts:
        return "", ""
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1]


# =============================================================================
# STAGE 2 - VALUES
# =============================================================================

def parse_number(text: str, field: str = "Amount") -> Decimal:
    """
    Parse a finite decimal number.

    NaN and infinities are a different error from text that is not a
    number at all.
    """
    stripped = text.strip()
    if stripped.lstrip("+-").lower() in _NON_FINITE:
        raise NonFiniteNumberError(f"{field} must be finite.")
    if not _NUMBER_PATTERN.fullmatch(stripped):
        raise MalformedNumberError(f"{field} must be a valid number.")

    value = Decimal(stripped)
    # Beyond double range the value would read as infinite, and summing it overflows
    if not value.is_zero() and value.adjusted() > MAX_NUMBER_EXPONENT:
        logger.warning("number_out_of_range", field=field, exponent=value.adjusted())
        raise NonFiniteNumberError(f"{field} must be finite.")
    return value


def parse_amount(text: str) -> Decimal:
    """Amount of a record being created or modified: finite and > 0."""
    value = parse_number(text, "Amount")
    if value <= 0:
        raise NonPositiveAmountError("Amount must be a positive number.")
    return value


def parse_limit(text: str) -> Decimal:
    """Budget limit: finite and >= 0."""
    value = parse_number(text, "Amount")
    if value < 0:
        raise NegativeLimitError("Amount must be non-negative.")
    # Normalise -0 to 0
    return value if value != 0 else Decimal("0")


def parse_date(
    text: str,
    *,
    allow_future: bool = False,
    today: Optional[date] = None,
) -> date:
    """
    Parse a YYYY-MM-DD calendar date.

    Args:
        text: Date text.
        allow_future: Accept dates after today.
        today: Reference day for the future check (defaults to date.today()).
    """
    match = _DATE_PATTERN.fullmatch(text.strip())
    if match is None:
        raise MalformedDateError("Date must be in YYYY-MM-DD format.")

    year, month, day = (int(part) for part in match.groups())
    try:
        value = date(year, month, day)
    except ValueError:
        raise InvalidCalendarDateError(
            f"Date {match.group(0)} is not a valid calendar date."
        ) from None

    if not allow_future and value > (today or date.today()):
        raise FutureDateError("Date cannot be in the future.")
    return value


def parse_month(text: str) -> YearMonth:
    """Parse a YYYY-MM month."""
    match = _MONTH_PATTERN.fullmatch(text.strip())
    if match is None:
        raise MalformedDateError("Month must be in YYYY-MM format.")
    year, month = int(match.group(1)), int(match.group(2))
    if year < 1 or not 1 <= month <= 12:
        raise MalformedDateError("Month must be in YYYY-MM format.")
    return YearMonth(year=year, month=month)


def parse_index(text: str, label: str) -> int:
    """
    Parse a 1-based visible index.

    Outcomes, each with its own message:
    - not an integer at all           -> MalformedIndexError
    - above the platform maximum      -> IndexTooLargeError
    - below the platform minimum      -> IndexTooSmallError
    - a representable integer below 1 -> IndexTooSmallError
    """
    stripped = text.strip()
    if not _INDEX_PATTERN.fullmatch(stripped):
        raise MalformedIndexError(f"{label} index must be a valid number.")

    value = int(stripped)
    if value > INDEX_MAX:
        raise IndexTooLargeError(
            f"{label} index is too large. It must be at most {INDEX_MAX}."
        )
    if value < INDEX_MIN:
        raise IndexTooSmallError(
            f"{label} index is too small. It must be at least {INDEX_MIN}."
        )
    if value < 1:
        raise IndexTooSmallError(f"{label} index must be a positive number.")
    return value
