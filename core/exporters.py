"""
Excel export of an analysis run: classified transactions plus a summary
sheet with per-category totals and the settlement.
"""
import io
from datetime import datetime
from typing import List

import pandas as pd

from core.exceptions import ExportError
from core.formatting import describe_settlement
from core.logger import setup_logger
from core.schema import DEFAULT_PARTY_CODES, AnalysisResult, PartyCodes

logger = setup_logger(__name__)

TRANSACTIONS_SHEET = "Transactions"
SUMMARY_SHEET = "Summary"

TRANSACTION_COLUMNS: List[str] = [
    "Date", "Transaction Remarks", "Withdrawal", "Deposit", "Balance", "Who",
]


def build_transactions_frame(result: AnalysisResult, codes: PartyCodes = DEFAULT_PARTY_CODES) -> pd.DataFrame:
    """One row per transaction, in file order."""
    records = [
        {
            "Date": txn.date,
            "Transaction Remarks": txn.remarks,
            "Withdrawal": float(txn.withdrawal),
            "Deposit": float(txn.deposit),
            "Balance": float(txn.balance),
            "Who": codes.code_for(txn.party),
        }
        for txn in result.transactions
    ]
    return pd.DataFrame(records, columns=TRANSACTION_COLUMNS)


def build_summary_frame(result: AnalysisResult, codes: PartyCodes = DEFAULT_PARTY_CODES) -> pd.DataFrame:
    """Per-category totals followed by the settlement line."""
    records = [
        {
            "Category": codes.code_for(party),
            "Total Deposits": float(summary.total_deposits),
            "Total Withdrawals": float(summary.total_withdrawals),
            "Net": float(summary.net),
            "Transactions": summary.count,
            "Previous Balance": float(summary.prior_balance),
        }
        for party, summary in result.summaries.items()
    ]
    records.append({
        "Category": f"Settlement: {describe_settlement(result.settlement, codes)}",
        "Net": float(result.settlement.amount),
    })
    return pd.DataFrame(records)


def _autofit(worksheet, df: pd.DataFrame) -> None:
    for idx, col in enumerate(df.columns):
        # Cells missing from the settlement row are NaN
        values = df[col].map(lambda v: 0 if pd.isna(v) else len(str(v)))
        max_len = max(values.max() if len(values) else 0, len(str(col)))
        worksheet.set_column(idx, idx, min(max_len + 2, 60))


def export_to_excel(result: AnalysisResult, codes: PartyCodes = DEFAULT_PARTY_CODES) -> bytes:
    """
    Render an analysis result as an .xlsx workbook.

    Args:
        result: Completed analysis
        codes: Party codes shown in the "Who" and "Category" columns

    Returns:
        Workbook content

    Raises:
        ExportError: If the workbook cannot be written
    """
    transactions_df = build_transactions_frame(result, codes)
    summary_df = build_summary_frame(result, codes)

    logger.info(f"Exporting {len(transactions_df)} transactions to Excel")

    buffer = io.BytesIO()
    try:
        with pd.ExcelWriter(buffer, engine="xlsxwriter") as writer:
            transactions_df.to_excel(writer, sheet_name=TRANSACTIONS_SHEET, index=False)
            summary_df.to_excel(writer, sheet_name=SUMMARY_SHEET, index=False)

            workbook = writer.book
            money_format = workbook.add_format({"num_format": "#,##0.00"})

            worksheet = writer.sheets[TRANSACTIONS_SHEET]
            _autofit(worksheet, transactions_df)
            worksheet.set_column(2, 4, 16, money_format)

            _autofit(writer.sheets[SUMMARY_SHEET], summary_df)
    except Exception as e:
        logger.error(f"Failed to export Excel: {e}")
        raise ExportError(
            "Failed to export to Excel",
            details={"error": str(e)}
        )

    return buffer.getvalue()


def create_output_filename(prefix: str = "partnership_transactions") -> str:
    """Timestamped download name for an export."""
    timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S")
    return f"{prefix}_{timestamp}.xlsx"
