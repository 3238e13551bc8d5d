"""Shared fixtures for the test suite."""

import matplotlib
matplotlib.use("Agg")

import geopandas as gpd
import numpy as np
import pandas as pd
import pytest
from shapely.geometry import box

from geo_explore.config import Config
from geo_explore.spatial import build_point_pattern

UTM = "EPSG:32610"


@pytest.fixture
def square_window():
    """1 km square in UTM 10N."""
    return box(500000, 4100000, 501000, 4101000)


@pytest.fixture
def window_frame(square_window):
    return gpd.GeoDataFrame({'name': ['study area']}, geometry=[square_window], crs=UTM)


@pytest.fixture
def points_frame(square_window):
    """50 uniform points inside the window plus 3 outside it."""
    rng = np.random.default_rng(0)
    minx, miny, maxx, maxy = square_window.bounds
    xs = np.concatenate([rng.uniform(minx, maxx, 50), [minx - 10, maxx + 50, minx + 500]])
    ys = np.concatenate([rng.uniform(miny, maxy, 50), [miny + 100, miny + 100, maxy + 20]])
    regions = np.where(xs < minx + 500, 'west', 'east')
    return gpd.GeoDataFrame({'region': regions}, geometry=gpd.points_from_xy(xs, ys), crs=UTM)


@pytest.fixture
def pattern(points_frame, window_frame):
    return build_point_pattern(points_frame, window_frame, mark_columns=['region'])


@pytest.fixture
def monthly_series():
    """Four years of monthly values with a yearly cycle and a linear trend."""
    index = pd.period_range('2000-01', periods=48, freq='M')
    t = np.arange(48)
    rng = np.random.default_rng(1)
    values = 10 + 0.1 * t + 3 * np.sin(2 * np.pi * t / 12) + rng.normal(0, 0.3, 48)
    return pd.Series(values, index=index, name='value')


@pytest.fixture
def daily_frame():
    """Raw table of daily readings with month/day/year date strings."""
    dates = pd.date_range('2000-01-01', '2003-12-31', freq='D')
    t = np.arange(len(dates))
    values = 20 + 5 * np.sin(2 * np.pi * t / 365.25)
    return pd.DataFrame({
        'Date': dates.strftime('%m/%d/%Y'),
        'value': values,
        'station': 'A',
    })


@pytest.fixture
def test_config(tmp_path):
    """Config isolated from any config.yml on disk, writing under tmp_path."""
    config_file = tmp_path / 'config.yml'
    config_file.write_text(
        "paths:\n"
        f"  output_dir: {tmp_path / 'outputs'}\n"
        f"  logs_dir: {tmp_path / 'logs'}\n"
    )
    return Config(config_file)
