# geo_explore/temporal/decomposition.py
"""
Seasonal-trend decomposition with STL.

A ``"periodic"`` seasonal window fits STL with a window wider than the
series and then averages the seasonal component per cycle position, so
every January (say) gets the same seasonal value.
"""

import math
import re
from typing import Optional, Union

import numpy as np
import pandas as pd
from statsmodels.tsa.seasonal import STL

from geo_explore.abstractions.types import DecompositionResult, PERIODIC
from geo_explore.exceptions import InsufficientDataError
from geo_explore.infrastructure.logging import get_logger, log_operation

logger = get_logger(__name__)

# Observations per cycle by frequency alias
_PERIODS = {
    'M': 12, 'ME': 12, 'MS': 12,
    'W': 52,
    'D': 7,
    'Q': 4, 'QE': 4, 'QS': 4,
}

SeasonalWindow = Union[int, float, str]


def infer_period(index: pd.Index) -> int:
    """Cycle length implied by the index frequency."""
    freq = getattr(index, 'freqstr', None)
    if freq is None and isinstance(index, pd.DatetimeIndex) and len(index) >= 3:
        freq = pd.infer_freq(index)
    if not freq:
        raise ValueError("Cannot infer a period from an index without frequency; pass period")

    prefix = re.match(r'\d*([A-Za-z]*)', freq).group(1).upper()
    if prefix not in _PERIODS:
        raise ValueError(f"No default period for frequency '{freq}'; pass period")
    return _PERIODS[prefix]


def _normalise_window(seasonal_window: SeasonalWindow) -> Optional[int]:
    """None for a periodic window, otherwise the validated odd integer."""
    if isinstance(seasonal_window, str):
        if seasonal_window.strip().lower() == PERIODIC:
            return None
        try:
            seasonal_window = int(seasonal_window)
        except ValueError:
            raise ValueError(f"Seasonal window must be '{PERIODIC}' or an odd integer, "
                             f"got {seasonal_window!r}")
    elif isinstance(seasonal_window, float):
        if math.isinf(seasonal_window):
            return None
        if not seasonal_window.is_integer():
            raise ValueError(f"Seasonal window must be an integer, got {seasonal_window}")
        seasonal_window = int(seasonal_window)

    if seasonal_window < 3 or seasonal_window % 2 == 0:
        raise ValueError(f"Seasonal window must be odd and >= 3, got {seasonal_window}")
    return seasonal_window


def _regular(series: pd.Series) -> pd.Series:
    """
    Insert missing rows for calendar periods absent from a period index.

    A ``DatetimeIndex`` must carry or imply a frequency, since its gaps
    cannot be placed on a calendar.
    """
    index = series.index
    if isinstance(index, pd.PeriodIndex) and len(series):
        full = pd.period_range(index.min(), index.max(), freq=index.freq)
        return series.reindex(full)
    if isinstance(index, pd.DatetimeIndex) and index.freq is None:
        if len(index) < 3 or pd.infer_freq(index) is None:
            raise ValueError("Date index has no regular frequency; aggregate to a "
                             "calendar granularity before decomposing")
    return series


@log_operation("decompose")
def decompose(series: pd.Series,
              seasonal_window: SeasonalWindow = PERIODIC,
              period: Optional[int] = None,
              robust: bool = False) -> DecompositionResult:
    """
    Split a regularly spaced series into seasonal, trend and remainder.

    Args:
        series: Measurements on a regular index (typically aggregated)
        seasonal_window: ``"periodic"`` (or ``inf``) for a fixed seasonal
            pattern, otherwise an odd integer >= 3
        period: Observations per cycle; inferred from the index frequency
        robust: Use STL's robust weighting

    Returns:
        DecompositionResult on the index of ``series``

    Raises:
        InsufficientDataError: fewer than two full cycles of observations
        ValueError: invalid window or period, or a date index without a
            regular frequency
    """
    window = _normalise_window(seasonal_window)
    observed = series.astype(float)
    if period is None:
        period = infer_period(observed.index)
    if period < 2:
        raise ValueError(f"Period must be at least 2, got {period}")

    n_observed = int(observed.notna().sum())
    if n_observed < 2 * period:
        raise InsufficientDataError(
            f"Decomposition with period {period} needs at least {2 * period} "
            f"observations, got {n_observed}")

    # Trim leading/trailing gaps and fill interior ones for fitting
    regular = _regular(observed)
    fitted = regular.loc[regular.first_valid_index():regular.last_valid_index()]
    filled = fitted.interpolate(method='linear', limit_area='inside')
    n = len(filled)

    if window is None:
        stl = STL(filled.to_numpy(), period=period, seasonal=10 * n + 1,
                  seasonal_deg=0, robust=robust)
    else:
        stl = STL(filled.to_numpy(), period=period, seasonal=window, robust=robust)
    fit = stl.fit()

    seasonal = pd.Series(fit.seasonal, index=filled.index)
    trend = pd.Series(fit.trend, index=filled.index)
    if window is None:
        position = np.arange(n) % period
        seasonal = seasonal.groupby(position).transform('mean')

    seasonal = seasonal.reindex(observed.index)
    trend = trend.reindex(observed.index)
    remainder = observed - seasonal - trend

    logger.debug(f"STL period={period} window={seasonal_window} on {n} points")
    return DecompositionResult(
        observed=observed.rename('observed'),
        seasonal=seasonal.rename('seasonal'),
        trend=trend.rename('trend'),
        remainder=remainder.rename('remainder'),
        period=period,
        seasonal_window=PERIODIC if window is None else window,
    )
