"""
CSV reading for bank transaction exports.
Returns the header and data rows as raw text cells; interpretation of
the cells happens in the column mapper and the aggregator.
"""
from pathlib import Path
from typing import IO, Any, List, Tuple, Union

import pandas as pd

from core.exceptions import EmptyHeaderError, StreamOpenError
from core.logger import setup_logger

logger = setup_logger(__name__)

CsvSource = Union[str, Path, IO[Any]]

Rows = List[List[Any]]


def _read_frame(handle: IO[Any], encoding: str) -> pd.DataFrame:
    """Read every line as text cells without treating the first one as a header."""
    return pd.read_csv(
        handle,
        header=None,
        dtype=str,
        sep=",",
        quotechar='"',
        escapechar="\\",
        encoding=encoding,
        keep_default_na=False,
        skip_blank_lines=False,
        engine="python",
        # Cells past the header width are never mapped; pandas drops them
        on_bad_lines=lambda bad_line: bad_line,
    )


def read_csv_rows(source: CsvSource, encoding: str = "utf-8-sig") -> Tuple[List[Any], Rows]:
    """
    Read a CSV source into a header row and data rows.

    Paths are opened and closed here. Streams are read as they are and left
    for the caller to close.

    Args:
        source: File path or readable text/binary stream
        encoding: Text encoding for paths and binary streams

    Returns:
        (header cells, list of data rows)

    Raises:
        StreamOpenError: If the source cannot be opened or decoded
        EmptyHeaderError: If the source has no header row
    """
    try:
        if isinstance(source, (str, Path)):
            path = Path(source)
            logger.info(f"Reading transactions from {path.name}")
            with open(path, "r", encoding=encoding, newline="") as handle:
                df = _read_frame(handle, encoding)
        else:
            df = _read_frame(source, encoding)
    except pd.errors.EmptyDataError:
        raise EmptyHeaderError(details={"source": str(source)})
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as e:
        logger.error(f"Unable to read CSV source {source}: {e}")
        raise StreamOpenError(
            "Unable to open CSV file.",
            details={"source": str(source), "error": str(e)}
        )

    if len(df) == 0:
        raise EmptyHeaderError(details={"source": str(source)})

    # Short rows are padded with NaN
    df = df.fillna("")

    header = df.iloc[0].tolist()
    rows = df.iloc[1:].values.tolist()

    logger.info(f"Read header with {len(header)} columns and {len(rows)} data rows")
    return header, rows
