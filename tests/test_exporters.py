"""
Unit tests for the Excel export.
"""
from decimal import Decimal

from core.exporters import (
    TRANSACTION_COLUMNS,
    build_summary_frame,
    build_transactions_frame,
    create_output_filename,
    export_to_excel,
)
from core.schema import AnalysisResult
from services.analysis_service import AnalysisService

HEADER = ["Date", "Description", "Withdrawal", "Deposit", "Balance", "Who"]


def sample_result() -> AnalysisResult:
    rows = [
        ["1/1", "x", "100", "0", "900", "NB"],
        ["1/2", "y", "0", "50", "950", "NS"],
        ["1/3", "z", "20", "", "930", "C"],
    ]
    return AnalysisService().analyze_rows(HEADER, rows)


def test_transactions_frame_keeps_order_and_codes():
    df = build_transactions_frame(sample_result())
    assert list(df.columns) == TRANSACTION_COLUMNS
    assert df["Transaction Remarks"].tolist() == ["x", "y", "z"]
    assert df["Who"].tolist() == ["NB", "NS", "C"]
    assert df["Withdrawal"].tolist() == [100.0, 0.0, 20.0]


def test_summary_frame_has_each_category_and_settlement():
    df = build_summary_frame(sample_result())
    assert df["Category"].tolist()[:4] == ["NB", "NS", "C", "Unspecified"]
    assert df.loc[0, "Net"] == 110.0
    assert df.loc[1, "Net"] == -40.0
    assert df["Category"].tolist()[-1] == "Settlement: NB owes NS"
    assert df["Net"].tolist()[-1] == 75.0


def test_export_to_excel_returns_workbook_bytes():
    content = export_to_excel(sample_result())
    # .xlsx files are zip archives
    assert content[:2] == b"PK"


def test_export_empty_result():
    content = export_to_excel(AnalysisResult())
    assert content[:2] == b"PK"



def test_summary_with_settlement_row_exports():
    """The settlement row leaves most summary cells empty."""
    result = sample_result()
    df = build_summary_frame(result)
    assert df.iloc[-1].isna().sum() == len(df.columns) - 2

    content = export_to_excel(result)
    assert content[:2] == b"PK"


def test_create_output_filename():
    name = create_output_filename()
    assert name.startswith("partnership_transactions_")
    assert name.endswith(".xlsx")


def test_net_values_are_decimal_in_result():
    assert sample_result().summaries.party_a.net == Decimal("110")
