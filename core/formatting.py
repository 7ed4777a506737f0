"""
Presentation helpers for the HTML report and the Excel export.
"""
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Union

from core.schema import DEFAULT_PARTY_CODES, PartyCodes, Settlement

Number = Union[int, float, Decimal]

CENT = Decimal("0.01")


def format_currency(amount: Number, symbol: str = "₹") -> str:
    """
    Format an amount with thousands separators and two decimals.

    Args:
        amount: Amount to format
        symbol: Currency symbol prefix

    Returns:
        e.g. "₹1,234.50" or "-₹75.00"
    """
    value = Decimal(str(amount))
    with localcontext() as ctx:
        # Room for every integer digit plus the two decimals
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        value = value.quantize(CENT, rounding=ROUND_HALF_UP)
        sign = "-" if value < 0 else ""
        return f"{sign}{symbol}{abs(value):,.2f}"


def format_bytes(size: int) -> str:
    """Human readable file size: bytes, KB or MB."""
    if size >= 1048576:
        return f"{size / 1048576:,.2f} MB"
    if size >= 1024:
        return f"{size / 1024:,.2f} KB"
    return f"{size} bytes"


def describe_settlement(settlement: Settlement, codes: PartyCodes = DEFAULT_PARTY_CODES) -> str:
    """One-line summary such as "NS owes NB"."""
    if settlement.is_settled:
        return "Accounts are settled"
    owing = codes.code_for(settlement.owing_party)
    receiving = codes.code_for(settlement.receiving_party)
    return f"{owing} owes {receiving}"
