"""Tests for calendar range selection."""

import datetime

import pandas as pd
import pytest

from geo_explore.temporal import filter_by_range
from geo_explore.temporal.range_filter import token_bounds


@pytest.fixture
def daily():
    index = pd.date_range('2000-01-01', '2001-12-31', freq='D')
    return pd.Series(range(len(index)), index=index)


class TestTokens:
    """Mapping range tokens to instants."""

    def test_year_token(self):
        start, end = token_bounds('2000')

        assert start == pd.Timestamp('2000-01-01')
        assert end.date() == datetime.date(2000, 12, 31)

    def test_month_token_covers_whole_month(self):
        start, end = token_bounds('2000-02')

        assert start == pd.Timestamp('2000-02-01')
        assert end.date() == datetime.date(2000, 2, 29)

    @pytest.mark.parametrize('token', ['20x1', '2000-13', 'yesterday-ish'])
    def test_unparsable(self, token):
        with pytest.raises(ValueError):
            token_bounds(token)


class TestFilterByRange:
    """Inclusive range selection on date and period indexes."""

    def test_open_range_returns_everything(self, daily):
        assert len(filter_by_range(daily)) == len(daily)
        assert len(filter_by_range(daily, '.', '.')) == len(daily)

    def test_whole_year(self, daily):
        selected = filter_by_range(daily, '2001', '2001')

        assert len(selected) == 365
        assert selected.index.min() == pd.Timestamp('2001-01-01')

    def test_month_bounds_are_inclusive(self, daily):
        selected = filter_by_range(daily, '2000-02', '2000-03')

        assert selected.index.min() == pd.Timestamp('2000-02-01')
        assert selected.index.max() == pd.Timestamp('2000-03-31')

    def test_exact_day(self, daily):
        assert len(filter_by_range(daily, '2000-06-15', '2000-06-15')) == 1

    def test_half_open(self, daily):
        selected = filter_by_range(daily, start='2001-12-01')

        assert len(selected) == 31

    def test_date_objects(self, daily):
        selected = filter_by_range(daily, datetime.date(2000, 1, 10), pd.Timestamp('2000-01-12'))

        assert len(selected) == 3

    def test_start_after_end_is_empty(self, daily):
        assert filter_by_range(daily, '2001', '2000').empty

    def test_period_index(self, monthly_series):
        selected = filter_by_range(monthly_series, '2001-06', '.')

        assert isinstance(selected.index, pd.PeriodIndex)
        assert len(selected) == 31
        assert str(selected.index[0]) == '2001-06'

    def test_dataframe(self, daily):
        frame = daily.to_frame('value')

        assert len(filter_by_range(frame, '2000-01', '2000-01')) == 31

    def test_invalid_token(self, daily):
        with pytest.raises(ValueError):
            filter_by_range(daily, 'next spring')
