# geo_explore/temporal/autocorrelation.py
"""Sample autocorrelation of a time series."""

import numpy as np
import pandas as pd
from statsmodels.tsa.stattools import acf

from geo_explore.infrastructure.logging import get_logger

logger = get_logger(__name__)


def confidence_bound(n: int, z: float = 1.96) -> float:
    """Half-width of the white-noise band for ``n`` observations."""
    if n <= 0:
        return np.nan
    return z / np.sqrt(n)


def autocorrelation(series: pd.Series, max_lag: int) -> pd.Series:
    """
    Autocorrelation at lags ``1..max_lag``.

    Lags that leave fewer than two overlapping observations are NaN, as
    is every lag of a constant series. Missing values are skipped pairwise.

    Args:
        series: Ordered measurements; the index is ignored
        max_lag: Largest lag to report

    Returns:
        Series named 'acf' indexed by lag
    """
    if max_lag < 1:
        raise ValueError("max_lag must be at least 1")

    values = pd.Series(series).astype(float).to_numpy()
    lags = pd.RangeIndex(1, max_lag + 1, name='lag')
    result = pd.Series(np.nan, index=lags, name='acf')

    feasible = min(max_lag, len(values) - 2)
    present = values[~np.isnan(values)]
    if feasible < 1 or len(present) < 2 or np.allclose(present, present[0]):
        logger.warning(f"Autocorrelation undefined for {len(present)} usable values")
        return result

    coefficients = acf(values, nlags=feasible, fft=False, missing='conservative')
    result.iloc[:feasible] = coefficients[1:feasible + 1]

    if feasible < max_lag:
        logger.debug(f"Lags {feasible + 1}..{max_lag} exceed series length {len(values)}")
    return result
