# geo_explore/temporal/loader.py
"""Read delimited tables and parse free-text date columns."""

from pathlib import Path
from typing import Optional, Union

import pandas as pd

from geo_explore.exceptions import TimeSeriesLoadError
from geo_explore.infrastructure.logging import get_logger, log_operation

logger = get_logger(__name__)

DEFAULT_DATE_FORMAT = '%m/%d/%Y'


@log_operation("load_table", log_args=True)
def load_table(path: Union[str, Path],
               date_column: Optional[str] = None,
               date_format: str = DEFAULT_DATE_FORMAT,
               sep: str = ',') -> pd.DataFrame:
    """
    Read a delimited text file with a header row.

    Args:
        path: File path
        date_column: Column parsed with ``parse_dates`` when given
        date_format: strptime format of the date column (month/day/year)
        sep: Field delimiter

    Returns:
        DataFrame
    """
    path = Path(path)
    if not path.exists():
        raise TimeSeriesLoadError(f"Table not found: {path}")

    try:
        frame = pd.read_csv(path, sep=sep)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, OSError) as e:
        raise TimeSeriesLoadError(f"Could not read table {path}: {e}", e)

    logger.info(f"Loaded {len(frame)} rows, {len(frame.columns)} columns from {path.name}")

    if date_column is not None:
        frame = parse_dates(frame, date_column, date_format)
    return frame


def parse_dates(frame: pd.DataFrame,
                column: str,
                date_format: str = DEFAULT_DATE_FORMAT) -> pd.DataFrame:
    """Return a copy of ``frame`` with ``column`` converted to datetime64.

    Raises:
        TimeSeriesLoadError: column missing, or a value that does not match
            ``date_format`` (the first offending row is named)
    """
    if column not in frame.columns:
        raise TimeSeriesLoadError(
            f"Date column '{column}' not found. Available: {list(frame.columns)}")

    raw = frame[column]
    if pd.api.types.is_datetime64_any_dtype(raw):
        return frame.copy()

    parsed = pd.to_datetime(raw.astype('string').str.strip(), format=date_format, errors='coerce')
    bad = parsed.isna()
    if bad.any():
        first = bad.idxmax()
        raise TimeSeriesLoadError(
            f"Row {first}: date value {raw[first]!r} does not match format '{date_format}'"
            f" ({int(bad.sum())} unparsable values)")

    out = frame.copy()
    out[column] = parsed
    return out
