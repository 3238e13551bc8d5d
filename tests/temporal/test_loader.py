"""Tests for table loading, date parsing and indexing."""

import pandas as pd
import pytest

from geo_explore.exceptions import DuplicateIndexError, TimeSeriesLoadError
from geo_explore.temporal import build_time_series, load_table, parse_dates


class TestLoadTable:
    """Reading delimited files."""

    def test_parses_month_day_year(self, tmp_path, daily_frame):
        path = tmp_path / 'readings.csv'
        daily_frame.to_csv(path, index=False)

        table = load_table(path, date_column='Date')

        assert pd.api.types.is_datetime64_any_dtype(table['Date'])
        assert table['Date'].iloc[0] == pd.Timestamp('2000-01-01')
        assert len(table) == len(daily_frame)

    def test_missing_file(self, tmp_path):
        with pytest.raises(TimeSeriesLoadError, match='not found'):
            load_table(tmp_path / 'absent.csv')

    def test_empty_file(self, tmp_path):
        path = tmp_path / 'empty.csv'
        path.write_text('')

        with pytest.raises(TimeSeriesLoadError):
            load_table(path)

    def test_missing_date_column(self, tmp_path, daily_frame):
        path = tmp_path / 'readings.csv'
        daily_frame.to_csv(path, index=False)

        with pytest.raises(TimeSeriesLoadError, match="'When'"):
            load_table(path, date_column='When')


class TestParseDates:
    """Free-text date conversion."""

    def test_first_bad_row_is_named(self):
        frame = pd.DataFrame({'Date': ['01/05/2001', '02/05/2001', '2001-03-05', 'soon']})

        with pytest.raises(TimeSeriesLoadError, match='Row 2'):
            parse_dates(frame, 'Date')

    def test_input_not_modified(self):
        frame = pd.DataFrame({'Date': ['12/31/1999']})
        parsed = parse_dates(frame, 'Date')

        assert frame['Date'].iloc[0] == '12/31/1999'
        assert parsed['Date'].iloc[0] == pd.Timestamp('1999-12-31')

    def test_custom_format(self):
        frame = pd.DataFrame({'Date': ['31.12.1999']})

        assert parse_dates(frame, 'Date', '%d.%m.%Y')['Date'].iloc[0].month == 12


class TestBuildTimeSeries:
    """Date indexing with uniqueness checks."""

    def setup_method(self):
        self.frame = pd.DataFrame({
            'Date': pd.to_datetime(['2001-03-01', '2001-01-01', '2001-02-01']),
            'value': [3.0, 1.0, 2.0],
            'station': ['A', 'A', 'A'],
        })

    def test_sorted_by_date(self):
        series = build_time_series(self.frame, 'Date')

        assert series.index.is_monotonic_increasing
        assert list(series['value']) == [1.0, 2.0, 3.0]

    def test_duplicate_timestamps(self):
        frame = pd.concat([self.frame, self.frame.iloc[[0]]])

        with pytest.raises(DuplicateIndexError) as exc_info:
            build_time_series(frame, 'Date')
        assert exc_info.value.duplicates == [pd.Timestamp('2001-03-01')]

    def test_duplicates_allowed_across_keys(self):
        other = self.frame.assign(station='B')
        frame = pd.concat([self.frame, other])

        table = build_time_series(frame, 'Date', key='station')

        assert len(table) == 6

    def test_duplicates_within_key(self):
        frame = pd.concat([self.frame, self.frame.iloc[[1]]])

        with pytest.raises(DuplicateIndexError):
            build_time_series(frame, 'Date', key='station')

    def test_non_datetime_column(self):
        frame = self.frame.assign(Date=['x', 'y', 'z'])

        with pytest.raises(TypeError):
            build_time_series(frame, 'Date')

    def test_missing_column(self):
        with pytest.raises(KeyError):
            build_time_series(self.frame, 'Timestamp')
