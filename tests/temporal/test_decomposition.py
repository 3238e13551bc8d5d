"""Tests for STL decomposition."""

import numpy as np
import pandas as pd
import pytest

from geo_explore.abstractions.types import DecompositionResult, Granularity, PERIODIC
from geo_explore.exceptions import InsufficientDataError
from geo_explore.temporal import aggregate, decompose, infer_period


def _monthly(n, start='2000-01', seed=2):
    t = np.arange(n)
    values = 5 + 0.05 * t + 2 * np.cos(2 * np.pi * t / 12) \
        + np.random.default_rng(seed).normal(0, 0.2, n)
    return pd.Series(values, index=pd.period_range(start, periods=n, freq='M'))


class TestDecompose:
    """Seasonal, trend and remainder components."""

    def test_components_reconstruct_observed(self, monthly_series):
        result = decompose(monthly_series)

        assert isinstance(result, DecompositionResult)
        assert np.allclose(result.reconstruct(), monthly_series)

    def test_periodic_seasonal_is_identical_per_month(self):
        """Two years of monthly data give one seasonal value per calendar month."""
        series = _monthly(24)

        result = decompose(series, seasonal_window=PERIODIC)

        first_year = result.seasonal.iloc[:12].to_numpy()
        second_year = result.seasonal.iloc[12:].to_numpy()
        assert np.allclose(first_year, second_year)
        assert result.seasonal_window == PERIODIC
        assert result.period == 12

    def test_infinite_window_means_periodic(self):
        result = decompose(_monthly(36), seasonal_window=float('inf'))

        assert np.allclose(result.seasonal.iloc[:12], result.seasonal.iloc[24:])

    def test_integer_window(self, monthly_series):
        result = decompose(monthly_series, seasonal_window=7)

        assert result.seasonal_window == 7
        assert np.allclose(result.reconstruct(), monthly_series)

    def test_recovers_seasonal_shape(self, monthly_series):
        result = decompose(monthly_series)

        # sin peaks in month 3 (index 3), troughs in month 9
        assert result.seasonal.iloc[3] > 2
        assert result.seasonal.iloc[9] < -2
        assert result.seasonal_strength > 0.8

    @pytest.mark.parametrize('window', [4, 1, 'weekly', 7.5])
    def test_invalid_window(self, monthly_series, window):
        with pytest.raises(ValueError):
            decompose(monthly_series, seasonal_window=window)

    def test_fewer_than_two_cycles(self):
        with pytest.raises(InsufficientDataError):
            decompose(_monthly(23))

    def test_missing_observations_count_against_length(self):
        series = _monthly(25)
        series.iloc[5] = np.nan
        series.iloc[6] = np.nan

        with pytest.raises(InsufficientDataError):
            decompose(series)

    def test_interior_gap_is_interpolated(self, monthly_series):
        series = monthly_series.copy()
        series.iloc[10] = np.nan

        result = decompose(series)

        assert np.isnan(result.remainder.iloc[10])
        assert not np.isnan(result.seasonal.iloc[10])
        observed = series.notna()
        assert np.allclose(result.reconstruct()[observed], series[observed])

    def test_leading_gap_is_trimmed(self, monthly_series):
        series = monthly_series.copy()
        series.iloc[0] = np.nan

        result = decompose(series)

        assert np.isnan(result.trend.iloc[0])
        assert result.trend.iloc[1:].notna().all()

    def test_absent_period_rows(self, monthly_series):
        """Buckets missing from the index are filled for fitting only."""
        series = monthly_series.drop(monthly_series.index[[7, 8]])

        result = decompose(series)

        assert result.seasonal.index.equals(series.index)
        assert result.seasonal.notna().all()
        assert np.allclose(result.seasonal[pd.Period('2000-01', 'M')],
                           result.seasonal[pd.Period('2001-01', 'M')])

    def test_regular_datetime_index(self):
        index = pd.date_range('2000-01-31', periods=36, freq='ME')
        t = np.arange(36)
        series = pd.Series(5 + 2 * np.cos(2 * np.pi * t / 12), index=index)

        result = decompose(series, period=12)

        assert result.seasonal.index.equals(index)
        assert np.allclose(result.seasonal.iloc[0], result.seasonal.iloc[12])

    def test_datetime_index_with_missing_months_rejected(self):
        """Dropped month-end rows would shift the cycle, even with an explicit period."""
        index = pd.date_range('2000-01-31', periods=36, freq='ME')
        series = pd.Series(np.arange(36, dtype=float), index=index)
        gapped = series.drop(index[[7, 8]])

        with pytest.raises(ValueError, match='regular frequency'):
            decompose(gapped, period=12)

    def test_irregular_datetime_index_rejected(self):
        stamps = pd.DatetimeIndex(['2000-01-01', '2000-01-03', '2000-01-10'])
        index = stamps.append(pd.date_range('2000-02-01', periods=27, freq='D'))
        series = pd.Series(np.arange(30, dtype=float), index=index)

        with pytest.raises(ValueError):
            decompose(series, period=7)

    def test_two_years_of_daily_data_aggregated_monthly(self):
        """Exactly 24 months of daily readings give one seasonal value per month."""
        days = pd.date_range('2000-01-01', '2001-12-31', freq='D')
        t = np.arange(len(days))
        daily = pd.Series(15 + 8 * np.sin(2 * np.pi * t / 365.25)
                          + np.random.default_rng(5).normal(0, 1, len(days)), index=days)

        monthly = aggregate(daily, Granularity.MONTH)
        result = decompose(monthly, seasonal_window=float('inf'))

        assert len(monthly) == 24
        assert np.allclose(result.seasonal.iloc[:12].to_numpy(),
                           result.seasonal.iloc[12:].to_numpy())
        assert np.allclose(result.reconstruct(), monthly, rtol=1e-6)

    def test_explicit_period(self):
        index = pd.RangeIndex(40)
        series = pd.Series(np.sin(2 * np.pi * np.arange(40) / 4), index=index)

        result = decompose(series, period=4)

        assert result.period == 4

    def test_to_frame(self, monthly_series):
        frame = decompose(monthly_series).to_frame()

        assert list(frame.columns) == ['observed', 'trend', 'seasonal', 'remainder']


class TestInferPeriod:
    """Default cycle length from the index frequency."""

    @pytest.mark.parametrize('index,expected', [
        (pd.period_range('2000-01', periods=3, freq='M'), 12),
        (pd.period_range('2000-01-03', periods=3, freq='W-SUN'), 52),
        (pd.date_range('2000-01-01', periods=3, freq='D'), 7),
        (pd.period_range('2000Q1', periods=3, freq='Q'), 4),
        (pd.date_range('2000-01-31', periods=5, freq='ME'), 12),
    ])
    def test_known_frequencies(self, index, expected):
        assert infer_period(index) == expected

    def test_irregular_index(self):
        index = pd.DatetimeIndex(['2000-01-01', '2000-01-02', '2000-01-10'])

        with pytest.raises(ValueError):
            infer_period(index)

    def test_yearly_has_no_default(self):
        with pytest.raises(ValueError):
            infer_period(pd.period_range('2000', periods=3, freq='Y'))
