"""Static and interactive renderers."""

from .plot_config import PlotConfig, RenderMode
from .spatial_plots import SpatialPlotter
from .temporal_plots import TemporalPlotter
from .io import save_figure

__all__ = [
    'PlotConfig',
    'RenderMode',
    'SpatialPlotter',
    'TemporalPlotter',
    'save_figure',
]
