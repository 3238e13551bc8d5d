# geo_explore/temporal/indexer.py
"""Build date-indexed time series tables."""

from typing import Optional

import pandas as pd

from geo_explore.exceptions import DuplicateIndexError
from geo_explore.infrastructure.logging import get_logger

logger = get_logger(__name__)


def build_time_series(frame: pd.DataFrame,
                      index_column: str,
                      key: Optional[str] = None) -> pd.DataFrame:
    """
    Index ``frame`` by its date column, sorted ascending.

    Timestamps must be unique, or unique per value of ``key`` when a
    grouping key is given. Gaps between timestamps are allowed.

    Raises:
        KeyError: index or key column missing
        TypeError: the index column is not a datetime column
        DuplicateIndexError: repeated timestamps
    """
    if index_column not in frame.columns:
        raise KeyError(f"Index column '{index_column}' not found")
    if key is not None and key not in frame.columns:
        raise KeyError(f"Key column '{key}' not found")
    if not pd.api.types.is_datetime64_any_dtype(frame[index_column]):
        raise TypeError(
            f"Column '{index_column}' is {frame[index_column].dtype}, not a date type; "
            "parse it with parse_dates first")

    subset = [key, index_column] if key is not None else [index_column]
    duplicated = frame.duplicated(subset=subset, keep=False)
    if duplicated.any():
        stamps = list(pd.DatetimeIndex(frame.loc[duplicated, index_column]).unique().sort_values())
        raise DuplicateIndexError(
            f"{int(duplicated.sum())} rows share {len(stamps)} timestamps, "
            f"first {stamps[0].date()}; pass a grouping key or aggregate first",
            duplicates=stamps)

    table = frame.sort_values(subset).set_index(index_column)

    logger.debug(f"Indexed {len(table)} rows from {table.index.min()} to {table.index.max()}")
    return table
