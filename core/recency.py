"""
Tracks the most recent transaction of a run.
"""
from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as date_parser

from core.logger import setup_logger
from core.schema import Transaction

logger = setup_logger(__name__)


def parse_date_instant(text: str) -> Optional[datetime]:
    """
    Parse free-form date text ("2024-01-31", "31 Jan 2024", "1/2/24 10:15").

    Args:
        text: Raw date text

    Returns:
        Naive datetime (aware values converted to UTC), or None if the text
        is empty or cannot be parsed
    """
    if not text or not text.strip():
        return None
    try:
        parsed = date_parser.parse(text.strip())
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class RecencyTracker:
    """
    Holds the latest transaction seen so far.

    The first row offered is always taken. After that a row replaces the
    held one only if its date parses and is >= the held date; a held row
    whose date never parsed gives way to any row with a parseable date.
    Equal instants go to the later row.
    """

    def __init__(self):
        self.latest: Optional[Transaction] = None
        self._latest_instant: Optional[datetime] = None

    def offer(self, txn: Transaction) -> bool:
        """
        Consider a transaction for the latest slot.

        Returns:
            True if the transaction became the latest
        """
        instant = parse_date_instant(txn.date)

        if self.latest is None:
            return self._take(txn, instant)

        if instant is None:
            return False

        if self._latest_instant is None or instant >= self._latest_instant:
            return self._take(txn, instant)

        return False

    def _take(self, txn: Transaction, instant: Optional[datetime]) -> bool:
        self.latest = txn
        self._latest_instant = instant
        logger.debug(f"Latest transaction is now dated '{txn.date}'")
        return True
