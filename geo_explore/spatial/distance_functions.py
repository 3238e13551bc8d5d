# geo_explore/spatial/distance_functions.py
"""
Distance-based summary functions: G, K and L.

All functions take the coordinates of the (inside) points, a distance
sequence ``r`` and the window area, and return one value per ``r``.
No edge correction is applied.
"""

from typing import Callable, Dict

import numpy as np
from scipy.spatial import cKDTree

from geo_explore.abstractions.types import SummaryFunction


def nearest_neighbour_distances(coords: np.ndarray) -> np.ndarray:
    """Distance from each point to its nearest other point."""
    if len(coords) < 2:
        return np.full(len(coords), np.nan)
    distances, _ = cKDTree(coords).query(coords, k=2)
    return distances[:, 1]


def g_function(coords: np.ndarray, r: np.ndarray, area: float = None) -> np.ndarray:
    """Empirical nearest-neighbour distance distribution G(r)."""
    r = np.asarray(r, dtype=float)
    if len(coords) < 2:
        return np.full(r.shape, np.nan)
    nnd = np.sort(nearest_neighbour_distances(coords))
    return np.searchsorted(nnd, r, side='right') / len(nnd)


def k_function(coords: np.ndarray, r: np.ndarray, area: float) -> np.ndarray:
    """Ripley's K(r) = area / (n (n - 1)) * #{ordered pairs i != j, d_ij <= r}."""
    r = np.asarray(r, dtype=float)
    n = len(coords)
    if n < 2:
        return np.full(r.shape, np.nan)
    tree = cKDTree(coords)
    # count_neighbors includes the n self-pairs at distance 0
    pairs = tree.count_neighbors(tree, r) - n
    return area * pairs / (n * (n - 1))


def l_function(coords: np.ndarray, r: np.ndarray, area: float) -> np.ndarray:
    """Variance-stabilised K: L(r) = sqrt(K(r) / pi)."""
    return np.sqrt(k_function(coords, r, area) / np.pi)


SUMMARY_FUNCTIONS: Dict[SummaryFunction, Callable] = {
    SummaryFunction.G: g_function,
    SummaryFunction.K: k_function,
    SummaryFunction.L: l_function,
}


def evaluate(function, coords: np.ndarray, r: np.ndarray, area: float) -> np.ndarray:
    """Evaluate the named summary function."""
    return SUMMARY_FUNCTIONS[SummaryFunction.from_value(function)](coords, r, area)


def theoretical_value(function, r: np.ndarray, intensity: float) -> np.ndarray:
    """Closed-form value under complete spatial randomness."""
    function = SummaryFunction.from_value(function)
    r = np.asarray(r, dtype=float)
    if function is SummaryFunction.G:
        return 1.0 - np.exp(-intensity * np.pi * r ** 2)
    if function is SummaryFunction.K:
        return np.pi * r ** 2
    return r.copy()
