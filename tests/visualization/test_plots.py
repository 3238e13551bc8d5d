"""Tests for static and interactive renderers."""

import folium
import matplotlib.pyplot as plt
import numpy as np
import pytest
from matplotlib.figure import Figure

from geo_explore.spatial import envelope, kernel_density
from geo_explore.temporal import autocorrelation, decompose, rolling_window
from geo_explore.visualization import (
    PlotConfig, RenderMode, SpatialPlotter, TemporalPlotter, save_figure,
)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


@pytest.fixture
def plot_config(tmp_path):
    return PlotConfig(figsize=(4, 3), dpi=50, output_dir=tmp_path / 'figures')


class TestPlotConfig:
    """Explicit rendering options."""

    def test_mode_from_string(self):
        config = PlotConfig(mode='interactive')

        assert config.mode is RenderMode.INTERACTIVE
        assert config.interactive

    def test_from_config(self, test_config):
        test_config.set('plotting.mode', 'interactive')
        test_config.set('plotting.dpi', 72)

        config = PlotConfig.from_config(test_config)

        assert config.interactive
        assert config.dpi == 72
        assert str(config.output_dir) == str(test_config.paths['output_dir'])

    def test_invalid_mode(self):
        with pytest.raises(ValueError):
            PlotConfig(mode='animated')


class TestSpatialPlotter:
    """Point pattern figures and maps."""

    def test_point_pattern_marks_illegal_points(self, pattern, plot_config):
        fig = SpatialPlotter(plot_config).plot_point_pattern(pattern)

        assert isinstance(fig, Figure)
        labels = fig.axes[0].get_legend_handles_labels()[1]
        assert 'inside (50)' in labels
        assert 'illegal (3)' in labels

    def test_density(self, pattern, plot_config):
        surface = kernel_density(pattern, sigma=100, dimyx=16)

        fig = SpatialPlotter(plot_config).plot_density(surface, pattern, show_points=True)

        assert isinstance(fig, Figure)
        assert '100' in fig.axes[0].get_title()

    def test_envelope(self, pattern, plot_config):
        result = envelope(pattern, r=np.linspace(0, 150, 10), nsim=5, seed=1)

        fig = SpatialPlotter(plot_config).plot_envelope(result)

        labels = fig.axes[0].get_legend_handles_labels()[1]
        assert 'G obs' in labels
        assert 'G theo' in labels

    def test_interactive_map_layers(self, pattern, plot_config):
        surface = kernel_density(pattern, sigma=100, dimyx=8)

        m = SpatialPlotter(plot_config).interactive_map(pattern, surface)

        assert isinstance(m, folium.Map)
        names = [child.layer_name for child in m._children.values()
                 if isinstance(child, folium.FeatureGroup)]
        assert 'inside (50)' in names
        assert 'illegal (3)' in names

    def test_heat_points_in_wgs84(self, pattern, plot_config):
        surface = kernel_density(pattern, sigma=100, dimyx=8)

        heat = SpatialPlotter(plot_config)._heat_points(surface, pattern)

        lats = [p[0] for p in heat]
        weights = [p[2] for p in heat]
        assert all(30 < lat < 45 for lat in lats)
        assert max(weights) == pytest.approx(1.0)


class TestTemporalPlotter:
    """Time series figures."""

    def test_series_with_smoothing(self, monthly_series, plot_config):
        smoothed = rolling_window(monthly_series, before=2, after=2)

        fig = TemporalPlotter(plot_config).plot_series(monthly_series, smoothed)

        assert len(fig.axes[0].lines) == 2

    def test_seasonal_one_line_per_year(self, monthly_series, plot_config):
        fig = TemporalPlotter(plot_config).plot_seasonal(monthly_series, 'month')

        assert len(fig.axes[0].lines) >= 4
        assert fig.axes[0].get_xlabel() == 'Month'

    def test_seasonal_rejects_yearly(self, monthly_series, plot_config):
        with pytest.raises(ValueError):
            TemporalPlotter(plot_config).plot_seasonal(monthly_series, 'year')

    def test_acf(self, monthly_series, plot_config):
        acf = autocorrelation(monthly_series, 12)

        fig = TemporalPlotter(plot_config).plot_acf(acf, len(monthly_series))

        assert len(fig.axes[0].patches) >= 12

    def test_decomposition_panels(self, monthly_series, plot_config):
        fig = TemporalPlotter(plot_config).plot_decomposition(decompose(monthly_series))

        assert len(fig.axes) == 4
        assert [ax.get_ylabel() for ax in fig.axes] == ['Observed', 'Trend', 'Seasonal',
                                                        'Remainder']


class TestSaveFigure:
    """Writing figures and maps to disk."""

    def test_png(self, pattern, plot_config):
        fig = SpatialPlotter(plot_config).plot_point_pattern(pattern)

        path = save_figure(fig, 'pattern', plot_config)

        assert path.name == 'pattern.png'
        assert path.exists()

    def test_html(self, pattern, plot_config):
        m = SpatialPlotter(plot_config).interactive_map(pattern)

        path = save_figure(m, 'pattern_map', plot_config)

        assert path.suffix == '.html'
        assert path.exists()

    def test_requires_output_dir(self, pattern):
        config = PlotConfig()
        fig = SpatialPlotter(config).plot_point_pattern(pattern)

        with pytest.raises(ValueError):
            save_figure(fig, 'pattern', config)
