"""
Unit tests for CSV reading.
"""
import io

import pytest

from core.exceptions import EmptyHeaderError, StreamOpenError
from core.normalize import to_text
from core.parsing import read_csv_rows

STANDARD_HEADER = "Value Date,Transaction Remarks,Withdrawal Amount,Deposit Amount,Balance,Who"


def test_reads_header_and_rows(write_csv):
    path = write_csv([
        STANDARD_HEADER,
        "2024-01-01,Opening,100,0,900,NB",
        "2024-01-02,Refund,0,50,950,NS",
    ])
    header, rows = read_csv_rows(path)
    assert header[0] == "Value Date"
    assert header[-1] == "Who"
    assert len(rows) == 2
    assert rows[1] == ["2024-01-02", "Refund", "0", "50", "950", "NS"]


def test_cells_stay_text(write_csv):
    """Leading zeros and 'nan' are not interpreted by the reader."""
    path = write_csv([STANDARD_HEADER, "2024-01-01,007,nan,-,0100,C"])
    _, rows = read_csv_rows(path)
    assert rows[0] == ["2024-01-01", "007", "nan", "-", "0100", "C"]


def test_quoted_cells_with_commas(write_csv):
    path = write_csv([STANDARD_HEADER, '2024-01-01,"Rent, March","1,200.00",,"5,000",C'])
    _, rows = read_csv_rows(path)
    assert rows[0][1] == "Rent, March"
    assert rows[0][2] == "1,200.00"
    assert to_text(rows[0][3]) == ""


def test_blank_lines_are_kept_as_blank_rows(write_csv):
    path = write_csv([STANDARD_HEADER, "2024-01-01,a,1,,,NB", "", "2024-01-02,b,1,,,NS"])
    _, rows = read_csv_rows(path)
    assert len(rows) == 3
    assert rows[1] == [""] * 6


@pytest.mark.filterwarnings("ignore::pandas.errors.ParserWarning")
def test_short_and_long_rows(write_csv):
    path = write_csv([STANDARD_HEADER, "2024-01-01,short", "2024-01-02,long,1,2,3,NB,extra,cells"])
    _, rows = read_csv_rows(path)
    assert rows[0][2:] == ["", "", "", ""]
    assert rows[1][:6] == ["2024-01-02", "long", "1", "2", "3", "NB"]


def test_byte_order_mark_is_stripped(write_csv):
    path = write_csv([STANDARD_HEADER, "2024-01-01,a,1,,,NB"], encoding="utf-8-sig")
    header, _ = read_csv_rows(path)
    assert header[0] == "Value Date"


def test_reads_from_stream():
    stream = io.StringIO(STANDARD_HEADER + "\n2024-01-01,a,1,,,NB\n")
    header, rows = read_csv_rows(stream)
    assert len(header) == 6
    assert len(rows) == 1
    assert not stream.closed


def test_missing_file_raises_stream_open_error(tmp_path):
    with pytest.raises(StreamOpenError) as exc_info:
        read_csv_rows(tmp_path / "missing.csv")
    assert "missing.csv" in exc_info.value.details["source"]


def test_undecodable_file_raises_stream_open_error(tmp_path):
    path = tmp_path / "binary.csv"
    path.write_bytes(b"\xff\xfe\x00\x81bad")
    with pytest.raises(StreamOpenError):
        read_csv_rows(path, encoding="utf-8")


def test_empty_file_raises_empty_header_error(write_csv, tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("")
    with pytest.raises(EmptyHeaderError):
        read_csv_rows(path)
