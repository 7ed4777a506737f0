"""
Cell normalization: amounts, party labels and safe cell access.
Every function here is total; bad cell content degrades to a default
instead of failing the whole file.
"""
import re
from decimal import Decimal, DecimalException
from typing import Any, Optional, Sequence

import pandas as pd

from core.logger import setup_logger
from core.schema import DEFAULT_PARTY_CODES, Party, PartyCodes, ZERO

logger = setup_logger(__name__)

# Leading numeric portion: sign, digits, optional fraction, optional exponent
_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

_EMPTY_MARKERS = {"", "nan", "-"}

# Amounts of this many integer digits or more are not real bank figures
MAX_AMOUNT_DIGITS = 18


def to_text(value: Any) -> str:
    """
    Convert a raw cell value to trimmed text.

    Args:
        value: Cell value (string, number, None or pandas NaN)

    Returns:
        Trimmed string, empty for missing values
    """
    if value is None:
        return ""
    if not isinstance(value, str) and pd.isna(value):
        return ""
    return str(value).strip()


def cell_text(row: Sequence[Any], index: Optional[int]) -> str:
    """
    Safely read a cell by position.

    Args:
        row: Sequence of raw cells
        index: Column position, or None when the column is not mapped

    Returns:
        Trimmed cell text, empty when unmapped, out of range or missing
    """
    if index is None or index < 0 or index >= len(row):
        return ""
    return to_text(row[index])


def is_blank_row(row: Sequence[Any]) -> bool:
    """True when every cell of the row is empty after trimming."""
    return all(to_text(cell) == "" for cell in row)


def parse_amount(text: Any) -> Decimal:
    """
    Parse an amount cell into a Decimal.

    Empty text, "nan" (any case) and "-" yield zero. Thousands separators
    are removed and the leading numeric portion is parsed, so "1,234.50"
    gives 1234.50 and "12 INR" gives 12. Anything without a leading number,
    or with MAX_AMOUNT_DIGITS or more integer digits, yields zero.

    Args:
        text: Raw amount value

    Returns:
        Parsed amount, never raises
    """
    amount_str = to_text(text)

    if amount_str.lower() in _EMPTY_MARKERS:
        return ZERO

    cleaned = amount_str.replace(",", "")
    match = _NUMBER_PREFIX.match(cleaned)
    if not match:
        logger.debug(f"Unparseable amount '{amount_str}', using 0")
        return ZERO

    try:
        amount = +Decimal(match.group(0))
    except DecimalException:
        logger.debug(f"Unparseable amount '{amount_str}', using 0")
        return ZERO

    if amount and amount.adjusted() >= MAX_AMOUNT_DIGITS:
        logger.debug(f"Amount '{amount_str}' out of range, using 0")
        return ZERO
    return amount


def normalize_party(text: Any, codes: PartyCodes = DEFAULT_PARTY_CODES) -> Party:
    """
    Map a "Who" cell to a Party.

    Args:
        text: Raw cell value
        codes: Short codes for the named parties

    Returns:
        The party whose code matches exactly after trim and uppercase,
        otherwise Party.UNSPECIFIED
    """
    normalized = to_text(text).upper()
    if not normalized:
        return Party.UNSPECIFIED
    return codes.party_for_code(normalized) or Party.UNSPECIFIED
