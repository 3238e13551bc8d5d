"""Spatial point pattern analysis."""

from .geometry_loader import load_layer, reproject, load_point_layers
from .point_pattern import build_point_pattern, window_from_layer, quadrat_counts
from .density import kernel_density, density_series
from .distance_functions import g_function, k_function, l_function, theoretical_value
from .envelope import envelope, simulate_csr, rank_envelope, default_r

__all__ = [
    'load_layer',
    'reproject',
    'load_point_layers',
    'build_point_pattern',
    'window_from_layer',
    'quadrat_counts',
    'kernel_density',
    'density_series',
    'g_function',
    'k_function',
    'l_function',
    'theoretical_value',
    'envelope',
    'simulate_csr',
    'rank_envelope',
    'default_r',
]
