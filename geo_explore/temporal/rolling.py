# geo_explore/temporal/rolling.py
"""Positional sliding-window reductions."""

from typing import Callable, Union

import numpy as np
import pandas as pd
from pandas.api.indexers import BaseIndexer


class PositionalWindowIndexer(BaseIndexer):
    """Window of ``before`` preceding and ``after`` following positions.

    Windows are truncated at both ends of the series rather than padded,
    so the first position covers ``[0, after]``.
    """

    def get_window_bounds(self, num_values: int = 0, min_periods=None,
                          center=None, closed=None, step=None):
        positions = np.arange(num_values, dtype=np.int64)
        start = np.clip(positions - self.before, 0, num_values)
        end = np.clip(positions + self.after + 1, 0, num_values)
        return start, end


def rolling_window(series: Union[pd.Series, pd.DataFrame],
                   func: Union[str, Callable[[np.ndarray], float]] = 'mean',
                   before: int = 0,
                   after: int = 0) -> Union[pd.Series, pd.DataFrame]:
    """
    Reduce a positional window around every element.

    The window for position ``i`` is ``[max(0, i - before), min(n - 1, i + after)]``
    by position, not calendar distance. Missing values are skipped; a
    window with no values yields NaN. Output keeps the input index.

    Args:
        series: Series (or DataFrame) to smooth
        func: Name of a pandas rolling reduction or a callable on an array
        before: Preceding positions in each window
        after: Following positions in each window
    """
    if before < 0 or after < 0:
        raise ValueError("before and after must be non-negative")

    indexer = PositionalWindowIndexer(before=int(before), after=int(after))
    roller = series.rolling(indexer, min_periods=1)

    if callable(func):
        def reduce(values: np.ndarray) -> float:
            present = values[~np.isnan(values)]
            return func(present) if len(present) else np.nan
        return roller.apply(reduce, raw=True)

    return roller.agg(func)
