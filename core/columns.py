"""
Header discovery: maps bank export column names to semantic fields.
Matching is case-insensitive and substring based so that the many header
variations banks use ("Value Date", "Transaction Remarks", "Withdrawal Amount (INR)")
resolve to the same field.
"""
from typing import Any, Dict, List, Optional, Sequence

import Levenshtein
from pydantic import BaseModel

from core.exceptions import EmptyHeaderError, MissingColumnError
from core.logger import setup_logger
from core.normalize import to_text

logger = setup_logger(__name__)

VALUE_DATE = "value_date"
TRANSACTION_DATE = "transaction_date"
REMARKS = "remarks"
WITHDRAWAL = "withdrawal"
DEPOSIT = "deposit"
BALANCE = "balance"
PARTY = "party"

REQUIRED_FIELDS = (REMARKS, WITHDRAWAL, DEPOSIT, PARTY, BALANCE)

# Canonical header text per field, used for "did you mean" hints
CANONICAL_HEADERS: Dict[str, str] = {
    REMARKS: "transaction remarks",
    WITHDRAWAL: "withdrawal",
    DEPOSIT: "deposit",
    PARTY: "who",
    BALANCE: "balance",
}


class ColumnMap(BaseModel):
    """Column position of each semantic field. Dates are optional."""
    remarks: int
    withdrawal: int
    deposit: int
    party: int
    balance: int
    value_date: Optional[int] = None
    transaction_date: Optional[int] = None


def normalize_string(text: Any) -> str:
    """
    Normalize string for matching: lowercase, trim, remove extra spaces.

    Args:
        text: Input value

    Returns:
        Normalized string
    """
    return " ".join(to_text(text).lower().split())


def classify_header(header: str) -> Optional[str]:
    """
    Resolve one normalized header cell to a field name. First rule wins.

    Args:
        header: Normalized (lowercased, trimmed) header text

    Returns:
        Field name or None when the column is not used
    """
    if "value date" in header:
        return VALUE_DATE
    if "transaction date" in header and "posted" not in header:
        return TRANSACTION_DATE
    if "transaction remarks" in header or "description" in header:
        return REMARKS
    if "withdrawal" in header:
        return WITHDRAWAL
    if "deposit" in header:
        return DEPOSIT
    if "balance" in header and "closing" not in header:
        return BALANCE
    if header == "who":
        return PARTY
    return None


def closest_header(field: str, headers: Sequence[str]) -> Optional[str]:
    """
    Find the header most similar to a field's canonical name.

    Args:
        field: Missing field name
        headers: Normalized header cells

    Returns:
        Best matching header, or None when nothing is remotely similar
    """
    target = CANONICAL_HEADERS.get(field, field)
    best: Optional[str] = None
    best_score = 0.0
    for header in headers:
        if not header:
            continue
        score = Levenshtein.ratio(target, header)
        if score > best_score:
            best, best_score = header, score
    return best if best_score >= 0.5 else None


def map_columns(header_row: Optional[Sequence[Any]]) -> ColumnMap:
    """
    Build the field -> column position mapping from the header row.

    Args:
        header_row: Raw header cells in file order

    Returns:
        ColumnMap for the required and optional fields

    Raises:
        EmptyHeaderError: If the header row is absent or blank
        MissingColumnError: If a required field has no matching column
    """
    headers: List[str] = [normalize_string(cell) for cell in (header_row or [])]
    if not any(headers):
        raise EmptyHeaderError()

    positions: Dict[str, int] = {}
    for index, header in enumerate(headers):
        field = classify_header(header)
        if field is not None:
            positions[field] = index

    logger.debug(f"Column mapping: {positions}")

    for field in REQUIRED_FIELDS:
        if field not in positions:
            hint = closest_header(field, headers)
            logger.warning(f"Required column '{field}' not found (closest header: {hint!r})")
            raise MissingColumnError(
                field,
                details={"available_columns": headers, "closest_match": hint},
            )

    return ColumnMap(**positions)
