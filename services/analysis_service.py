"""
Analysis service.
Runs one CSV export through the engine: column mapping, row
classification, aggregation and settlement.
"""
from typing import Any, Optional, Sequence

from core.aggregate import TransactionAggregator
from core.columns import map_columns
from core.config import get_settings
from core.logger import setup_logger
from core.parsing import CsvSource, read_csv_rows
from core.schema import AnalysisResult, Party, PartyCodes, PriorBalances
from core.settlement import calculate_settlement

logger = setup_logger(__name__)


class AnalysisService:
    """Service for analysing partnership transaction exports."""

    def __init__(self, codes: Optional[PartyCodes] = None):
        """Initialize analysis service."""
        self.settings = get_settings()
        self.codes = codes or self.settings.party_codes()

    def analyze_rows(
        self,
        header: Optional[Sequence[Any]],
        rows: Sequence[Sequence[Any]],
        prior_balances: Optional[PriorBalances] = None,
    ) -> AnalysisResult:
        """
        Run the engine over rows that are already split into cells.

        Args:
            header: Header cells
            rows: Data rows in file order
            prior_balances: Caller-supplied carry-forward amounts

        Returns:
            AnalysisResult for this run

        Raises:
            EmptyHeaderError: If the header is absent or blank
            MissingColumnError: If a required column is missing
        """
        prior_balances = prior_balances or PriorBalances()

        columns = map_columns(header)
        aggregator = TransactionAggregator(columns, self.codes)
        aggregator.add_rows(rows)
        summaries = aggregator.finalize(prior_balances)

        settlement = calculate_settlement(
            summaries[Party.PARTY_A],
            summaries[Party.PARTY_B],
            prior_balances,
            epsilon=self.settings.settlement_epsilon,
        )

        return AnalysisResult(
            transactions=aggregator.transactions,
            summaries=summaries,
            latest_transaction=aggregator.latest_transaction,
            settlement=settlement,
            prior_balances=prior_balances,
            rows_skipped=aggregator.rows_skipped,
        )

    def analyze_file(
        self,
        source: CsvSource,
        prior_balances: Optional[PriorBalances] = None,
    ) -> AnalysisResult:
        """
        Read a CSV export and analyse it.

        Args:
            source: Path or readable stream
            prior_balances: Caller-supplied carry-forward amounts

        Returns:
            AnalysisResult for this run

        Raises:
            StreamOpenError: If the source cannot be read
            EmptyHeaderError: If the source has no header row
            MissingColumnError: If a required column is missing
        """
        logger.info(f"Analysing transactions from {source}")
        header, rows = read_csv_rows(source, encoding=self.settings.csv_encoding)
        result = self.analyze_rows(header, rows, prior_balances)
        logger.info(
            f"Analysis complete: {len(result.transactions)} transactions, "
            f"settled={result.settlement.is_settled}, amount={result.settlement.amount}"
        )
        return result
