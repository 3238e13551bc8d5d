# geo_explore/temporal/aggregation.py
"""Calendar aggregation of date-indexed series."""

from typing import Callable, Optional, Union

import numpy as np
import pandas as pd

from geo_explore.abstractions.types import Granularity
from geo_explore.infrastructure.logging import get_logger

logger = get_logger(__name__)

_NAMED_REDUCTIONS = {
    'mean': np.mean,
    'sum': np.sum,
    'median': np.median,
    'min': np.min,
    'max': np.max,
}

Reduction = Union[str, Callable[[np.ndarray], float]]
Data = Union[pd.Series, pd.DataFrame]


def _reducer(func: Reduction) -> Callable[[pd.Series], float]:
    if callable(func):
        reduce_values = func
    elif func in _NAMED_REDUCTIONS:
        reduce_values = _NAMED_REDUCTIONS[func]
    else:
        raise ValueError(f"Unknown reduction '{func}'. Valid: {sorted(_NAMED_REDUCTIONS)}")

    def reduce(values: pd.Series) -> float:
        present = values.dropna().to_numpy()
        # all-missing bucket has no value
        if not len(present):
            return np.nan
        return reduce_values(present)

    return reduce


def _periods(index: pd.Index, granularity: Granularity) -> pd.PeriodIndex:
    if isinstance(index, pd.PeriodIndex):
        return index.asfreq(granularity.freq)
    if isinstance(index, pd.DatetimeIndex):
        return index.to_period(granularity.freq)
    raise TypeError(f"Aggregation needs a date index, got {type(index).__name__}")


def aggregate(data: Data,
              granularity: Union[Granularity, str],
              func: Reduction = 'mean',
              key: Optional[str] = None) -> Data:
    """
    Reduce a date-indexed series per calendar bucket.

    One output row per day, week (Monday start), month or year that
    contains at least one input row. Missing values are skipped by the
    reduction, and a bucket whose values are all missing yields NaN.

    Args:
        data: Series or DataFrame indexed by date
        granularity: Calendar bucket size
        func: 'mean', 'sum', 'median', 'min', 'max' or a callable on an array
        key: Column of ``data`` to aggregate separately per value

    Returns:
        Same type as ``data`` indexed by period (``PeriodIndex``), or by
        (key, period) when ``key`` is given
    """
    granularity = Granularity.from_value(granularity)
    periods = _periods(data.index, granularity)
    reduce = _reducer(func)

    if isinstance(data, pd.DataFrame):
        columns = [c for c in data.select_dtypes('number').columns if c != key]
        values = data[columns]
    else:
        values = data

    if key is not None:
        if not isinstance(data, pd.DataFrame) or key not in data.columns:
            raise KeyError(f"Key column '{key}' not found")
        grouped = values.groupby([data[key].to_numpy(), periods])
    else:
        grouped = values.groupby(periods)

    result = grouped.agg(reduce)
    if key is not None:
        result.index.names = [key, 'period']
    else:
        result.index.name = 'period'

    logger.debug(f"Aggregated {len(data)} rows into {len(result)} {granularity.value} buckets")
    return result


def scan_gaps(data: Data, granularity: Union[Granularity, str]) -> pd.PeriodIndex:
    """Calendar periods between the first and last observation with no rows."""
    granularity = Granularity.from_value(granularity)
    present = _periods(data.index, granularity).unique()
    if len(present) == 0:
        return pd.PeriodIndex([], freq=granularity.freq)
    full = pd.period_range(present.min(), present.max(), freq=granularity.freq)
    return full.difference(present)
