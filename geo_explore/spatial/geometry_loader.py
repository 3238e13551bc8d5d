# geo_explore/spatial/geometry_loader.py
"""Load vector layers and move them into a target coordinate reference system."""

from pathlib import Path
from typing import Optional, Tuple, Union

import geopandas as gpd
from pyproj import CRS
from pyproj.exceptions import CRSError

from geo_explore.exceptions import GeometryLoadError, ProjectionError
from geo_explore.infrastructure.logging import get_logger, log_operation

logger = get_logger(__name__)

CrsLike = Union[int, str, CRS]
VECTOR_SUFFIXES = {".shp", ".gpkg", ".geojson", ".json", ".fgb"}


def as_crs(value: CrsLike) -> CRS:
    """Resolve an EPSG code (``32610``, ``"EPSG:32610"``) or CRS to a pyproj CRS."""
    try:
        if isinstance(value, CRS):
            return value
        if isinstance(value, int) or (isinstance(value, str) and value.isdigit()):
            return CRS.from_epsg(int(value))
        return CRS.from_user_input(value)
    except CRSError as e:
        raise ProjectionError(f"Invalid coordinate reference system: {value!r}", e)


def _resolve_source(source: Path, layer: Optional[str]) -> Tuple[Path, dict]:
    """Map a layer store plus layer name onto a read_file target."""
    if source.is_dir():
        if layer is None:
            raise GeometryLoadError(f"A layer name is required to read from directory {source}")
        shapefile = source / f"{layer}.shp"
        if shapefile.exists():
            return shapefile, {}
        matches = sorted(p for p in source.iterdir()
                         if p.stem == layer and p.suffix.lower() in VECTOR_SUFFIXES)
        if matches:
            return matches[0], {}
        raise GeometryLoadError(f"Layer '{layer}' not found in {source}")

    return source, ({'layer': layer} if layer is not None else {})


@log_operation("load_layer", log_args=True)
def load_layer(source: Union[str, Path],
               layer: Optional[str] = None,
               assume_crs: Optional[CrsLike] = None) -> gpd.GeoDataFrame:
    """
    Read one vector layer.

    A directory source is treated as a layer store: ``layer`` names a
    file inside it (``<layer>.shp`` or any file with that stem). For a
    single-file source such as a GeoPackage, ``layer`` selects the layer.

    Args:
        source: Directory layer store or vector file
        layer: Layer name
        assume_crs: CRS assigned when the layer carries none

    Returns:
        GeoDataFrame with a CRS set

    Raises:
        GeometryLoadError: source missing, unreadable, empty or with null geometries
        ProjectionError: no CRS on the layer and none to assume
    """
    source = Path(source)
    if not source.exists():
        raise GeometryLoadError(f"Vector source not found: {source}")

    target, read_kwargs = _resolve_source(source, layer)

    try:
        gdf = gpd.read_file(target, **read_kwargs)
    except Exception as e:
        raise GeometryLoadError(f"Could not read layer '{layer}' from {target}: {e}", e)

    if not isinstance(gdf, gpd.GeoDataFrame) or 'geometry' not in gdf:
        raise GeometryLoadError(f"Layer '{layer}' in {target} has no geometry column")
    if gdf.empty:
        raise GeometryLoadError(f"Layer '{layer}' in {target} contains no features")

    missing = int((gdf.geometry.isna() | gdf.geometry.is_empty).sum())
    if missing:
        raise GeometryLoadError(
            f"Layer '{layer}' in {target} has {missing} features without geometry")

    if gdf.crs is None:
        if assume_crs is None:
            raise ProjectionError(
                f"Layer '{layer}' in {target} has no CRS and none was given to assume")
        crs = as_crs(assume_crs)
        logger.warning(f"Layer '{layer}' has no CRS; assuming {crs.to_string()}")
        gdf = gdf.set_crs(crs)

    logger.info(f"Loaded {len(gdf)} features from layer '{layer}'",
                extra={'context': {'source': str(target), 'crs': gdf.crs.to_string()}})
    return gdf


def reproject(gdf: gpd.GeoDataFrame, epsg: CrsLike) -> gpd.GeoDataFrame:
    """Transform coordinates into ``epsg``; the input frame is not modified."""
    if gdf.crs is None:
        raise ProjectionError("Cannot reproject geometries without a source CRS")

    target = as_crs(epsg)
    if gdf.crs == target:
        return gdf.copy()

    try:
        projected = gdf.to_crs(target)
    except Exception as e:
        raise ProjectionError(
            f"Reprojection from {gdf.crs.to_string()} to {target.to_string()} failed: {e}", e)

    logger.debug(f"Reprojected {len(gdf)} features to {target.to_string()}")
    return projected


def load_point_layers(source: Union[str, Path],
                      points_layer: str,
                      window_layer: str,
                      epsg: CrsLike,
                      assume_crs: Optional[CrsLike] = None
                      ) -> Tuple[gpd.GeoDataFrame, gpd.GeoDataFrame]:
    """Load the observation and boundary layers, both reprojected to ``epsg``."""
    points = reproject(load_layer(source, points_layer, assume_crs), epsg)
    window = reproject(load_layer(source, window_layer, assume_crs), epsg)
    return points, window
