# geo_explore/spatial/point_pattern.py
"""Pair an observation set with its study window."""

from typing import List, Optional, Union

import geopandas as gpd
import numpy as np
from shapely.geometry import box
from shapely.geometry.base import BaseGeometry

from geo_explore.abstractions.types import PointPattern
from geo_explore.exceptions import GeometryLoadError, ProjectionError
from geo_explore.infrastructure.logging import get_logger

logger = get_logger(__name__)

WindowLike = Union[gpd.GeoDataFrame, gpd.GeoSeries, BaseGeometry]


def window_from_layer(window: WindowLike):
    """Dissolve a boundary layer into one polygonal window.

    Returns:
        Tuple of (geometry, crs); crs is None for a bare shapely geometry
    """
    if isinstance(window, (gpd.GeoDataFrame, gpd.GeoSeries)):
        if len(window) == 0:
            raise GeometryLoadError("Boundary layer contains no features")
        geometry = window.geometry.union_all()
        crs = window.crs
    elif isinstance(window, BaseGeometry):
        geometry, crs = window, None
    else:
        raise TypeError(f"Unsupported window type: {type(window).__name__}")

    if geometry.geom_type not in ('Polygon', 'MultiPolygon'):
        raise GeometryLoadError(f"Study window must be polygonal, got {geometry.geom_type}")
    if not geometry.is_valid:
        raise GeometryLoadError("Study window geometry is not valid")
    if geometry.area <= 0:
        raise GeometryLoadError("Study window has zero area")

    return geometry, crs


def _check_points(points: gpd.GeoDataFrame) -> None:
    if not isinstance(points, gpd.GeoDataFrame):
        raise TypeError("points must be a GeoDataFrame")
    geom_types = set(points.geom_type.dropna().unique())
    if geom_types - {'Point'}:
        raise GeometryLoadError(
            f"Observation layer must contain only points, found {sorted(geom_types)}")
    if (points.geometry.isna() | points.geometry.is_empty).any():
        raise GeometryLoadError("Observation layer contains empty geometries")


def build_point_pattern(points: gpd.GeoDataFrame,
                        window: WindowLike,
                        mark_columns: Optional[List[str]] = None) -> PointPattern:
    """
    Build a point pattern from reprojected observations and a boundary.

    Points outside the window are kept and flagged as illegal; their
    count is logged. Points on the boundary are inside.

    Args:
        points: Point observations
        window: Boundary layer or polygon in the same CRS
        mark_columns: Attribute columns carried as marks

    Returns:
        PointPattern

    Raises:
        ProjectionError: the two inputs are in different CRSs
        GeometryLoadError: non-point observations or a non-polygonal window
    """
    _check_points(points)
    window_geometry, window_crs = window_from_layer(window)

    if isinstance(window, (gpd.GeoDataFrame, gpd.GeoSeries)) and points.crs != window_crs:
        raise ProjectionError(
            f"Points CRS ({points.crs}) does not match window CRS ({window_crs})")

    mark_columns = list(mark_columns or [])
    missing = [c for c in mark_columns if c not in points.columns]
    if missing:
        raise KeyError(f"Mark columns not found in observations: {missing}")

    points = points.reset_index(drop=True)
    inside = points.geometry.covered_by(window_geometry).to_numpy()

    pattern = PointPattern(points=points, window=window_geometry,
                           inside=inside, mark_columns=mark_columns)

    if pattern.n_illegal:
        logger.warning(
            f"{pattern.n_illegal} of {pattern.n_total} points lie outside the window",
            extra={'context': {'n_illegal': pattern.n_illegal, 'n_total': pattern.n_total}}
        )

    logger.log_metrics("Point pattern built", **pattern.summary())
    return pattern


def quadrat_counts(pattern: PointPattern, nx: int = 5, ny: int = 5) -> gpd.GeoDataFrame:
    """
    Count inside points per rectangular quadrat over the window's bounds.

    Quadrats are clipped to the window and those not overlapping it are
    dropped. Columns: ``row``, ``col``, ``count``, ``area``, ``intensity``.
    """
    if nx < 1 or ny < 1:
        raise ValueError("nx and ny must be positive")

    minx, miny, maxx, maxy = pattern.window.bounds
    x_edges = np.linspace(minx, maxx, nx + 1)
    y_edges = np.linspace(miny, maxy, ny + 1)

    coords = pattern.coordinates
    counts, _, _ = np.histogram2d(coords[:, 0], coords[:, 1], bins=[x_edges, y_edges])

    records = []
    geometries = []
    for col in range(nx):
        for row in range(ny):
            cell = box(x_edges[col], y_edges[row], x_edges[col + 1], y_edges[row + 1])
            clipped = cell.intersection(pattern.window)
            if clipped.is_empty or clipped.area <= 0:
                continue
            records.append({
                'row': row,
                'col': col,
                'count': int(counts[col, row]),
                'area': clipped.area,
                'intensity': counts[col, row] / clipped.area,
            })
            geometries.append(clipped)

    return gpd.GeoDataFrame(records, geometry=geometries, crs=pattern.crs)
