"""
Row classification and per-category aggregation.
"""
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Sequence

from core.columns import ColumnMap
from core.logger import setup_logger
from core.normalize import cell_text, is_blank_row, normalize_party, parse_amount
from core.recency import RecencyTracker
from core.schema import (
    DEFAULT_PARTY_CODES,
    CategorySummaries,
    Party,
    PartyCodes,
    PriorBalances,
    Transaction,
)

logger = setup_logger(__name__)

TWO = Decimal("2")


class TransactionAggregator:
    """
    Walks data rows in file order, builds Transaction records and keeps
    running totals for each category.

    Shared rows are split 50/50 into PartyA and PartyB; the Shared summary
    only counts them.
    """

    def __init__(self, columns: ColumnMap, codes: PartyCodes = DEFAULT_PARTY_CODES):
        self.columns = columns
        self.codes = codes
        self.transactions: List[Transaction] = []
        self.summaries = CategorySummaries()
        self.recency = RecencyTracker()
        self.rows_skipped = 0

    @property
    def latest_transaction(self) -> Optional[Transaction]:
        return self.recency.latest

    def resolve_date(self, row: Sequence[Any]) -> str:
        """
        Value date cell when the row has one, even if blank; otherwise the
        transaction date, otherwise empty.
        """
        value_date = self.columns.value_date
        if value_date is not None and value_date < len(row):
            return cell_text(row, value_date)
        return cell_text(row, self.columns.transaction_date)

    def build_transaction(self, row: Sequence[Any]) -> Transaction:
        return Transaction(
            date=self.resolve_date(row),
            remarks=cell_text(row, self.columns.remarks),
            withdrawal=parse_amount(cell_text(row, self.columns.withdrawal)),
            deposit=parse_amount(cell_text(row, self.columns.deposit)),
            balance=parse_amount(cell_text(row, self.columns.balance)),
            party=normalize_party(cell_text(row, self.columns.party), self.codes),
        )

    def add_row(self, row: Sequence[Any]) -> Optional[Transaction]:
        """
        Classify one data row and fold it into the totals.

        Args:
            row: Raw cells in file order

        Returns:
            The created Transaction, or None if the row was blank
        """
        if is_blank_row(row):
            self.rows_skipped += 1
            return None

        txn = self.build_transaction(row)
        self.transactions.append(txn)
        self.recency.offer(txn)
        self._accumulate(txn)
        return txn

    def add_rows(self, rows: Iterable[Sequence[Any]]) -> None:
        for row in rows:
            self.add_row(row)

    def _accumulate(self, txn: Transaction) -> None:
        if txn.party == Party.SHARED:
            deposit_half = txn.deposit / TWO
            withdrawal_half = txn.withdrawal / TWO
            self.summaries[Party.PARTY_A].add(deposit_half, withdrawal_half)
            self.summaries[Party.PARTY_B].add(deposit_half, withdrawal_half)
            self.summaries[Party.SHARED].count += 1
            return

        summary = self.summaries[txn.party]
        summary.add(txn.deposit, txn.withdrawal)
        summary.count += 1

    def finalize(self, prior_balances: Optional[PriorBalances] = None) -> CategorySummaries:
        """
        Attach the caller's prior balances. Net is derived from the totals
        and never includes them.

        Returns:
            The final category summaries
        """
        prior_balances = prior_balances or PriorBalances()
        for party, summary in self.summaries.items():
            summary.prior_balance = prior_balances.for_party(party)

        unspecified = self.summaries[Party.UNSPECIFIED].count
        if unspecified:
            logger.warning(f"{unspecified} transaction(s) have no recognised party and need review")

        logger.info(
            f"Aggregated {len(self.transactions)} transactions "
            f"(skipped {self.rows_skipped} blank rows)"
        )
        return self.summaries
