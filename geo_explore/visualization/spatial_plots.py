# geo_explore/visualization/spatial_plots.py
"""Maps and curves for point pattern analysis."""

from typing import Optional

import contextily as ctx
import folium
import geopandas as gpd
import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns
import xarray as xr
from folium.plugins import HeatMap
from matplotlib.figure import Figure

from geo_explore.abstractions.types import EnvelopeResult, PointPattern
from geo_explore.infrastructure.logging import get_logger
from .plot_config import PlotConfig

logger = get_logger(__name__)

WGS84 = "EPSG:4326"


class SpatialPlotter:
    """Create static figures and interactive maps for point patterns."""

    def __init__(self, config: Optional[PlotConfig] = None):
        self.config = config or PlotConfig()

    def _draw_window(self, ax, pattern: PointPattern):
        gpd.GeoSeries([pattern.window], crs=pattern.crs).boundary.plot(
            ax=ax, color='black', linewidth=1)

    def _add_basemap(self, ax, pattern: PointPattern):
        if not self.config.basemap or pattern.crs is None:
            return
        ctx.add_basemap(ax, crs=pattern.crs.to_string(),
                        source=ctx.providers.CartoDB.Positron, zorder=0)

    def plot_point_pattern(self, pattern: PointPattern, title: str = 'Point pattern') -> Figure:
        """
        Plot observations inside the window, with illegal points marked.

        Args:
            pattern: Point pattern to draw
            title: Axes title

        Returns:
            Matplotlib figure
        """
        fig, ax = plt.subplots(figsize=self.config.figsize)
        self._draw_window(ax, pattern)

        inside = pattern.coordinates
        ax.scatter(inside[:, 0], inside[:, 1], s=12, c='tab:blue',
                   label=f'inside ({pattern.n_inside})', zorder=2)

        if pattern.n_illegal:
            illegal = pattern.illegal_coordinates
            ax.scatter(illegal[:, 0], illegal[:, 1], s=30, c='tab:red', marker='x',
                       label=f'illegal ({pattern.n_illegal})', zorder=3)

        self._add_basemap(ax, pattern)
        ax.set_title(title, fontsize=14, fontweight='bold')
        ax.set_aspect('equal')
        ax.legend(loc='upper right')
        return fig

    def plot_density(self, surface: xr.DataArray, pattern: PointPattern,
                     show_points: bool = False) -> Figure:
        """Heat map of a density surface over its window."""
        fig, ax = plt.subplots(figsize=self.config.figsize)

        xs = surface['x'].values
        ys = surface['y'].values
        dx = (xs[1] - xs[0]) if len(xs) > 1 else 1.0
        dy = (ys[1] - ys[0]) if len(ys) > 1 else 1.0
        extent = (xs[0] - dx / 2, xs[-1] + dx / 2, ys[0] - dy / 2, ys[-1] + dy / 2)

        im = ax.imshow(surface.values, origin='lower', extent=extent,
                       cmap=self.config.cmap, alpha=0.8 if self.config.basemap else 1.0,
                       zorder=1)
        plt.colorbar(im, ax=ax, label='Intensity (points per unit area)')
        self._draw_window(ax, pattern)

        if show_points:
            coords = pattern.coordinates
            ax.scatter(coords[:, 0], coords[:, 1], s=4, c='white', zorder=2)

        self._add_basemap(ax, pattern)
        ax.set_title(f"Kernel density, sigma = {surface.attrs.get('sigma', '?')}",
                     fontsize=14, fontweight='bold')
        ax.set_aspect('equal')
        return fig

    def plot_envelope(self, result: EnvelopeResult) -> Figure:
        """Observed summary function against CSR with the simulation envelope."""
        fig, ax = plt.subplots(figsize=self.config.figsize)
        r = result.r
        name = result.function.value

        ax.fill_between(r, result.lo, result.hi, color='lightgrey',
                        label=f'envelope ({result.nsim} sims, rank {result.nrank})')
        sns.lineplot(x=r, y=result.theo.to_numpy(), ax=ax, color='tab:red',
                     linestyle='--', label=f'{name} theo')
        sns.lineplot(x=r, y=result.obs.to_numpy(), ax=ax, color='black',
                     label=f'{name} obs')

        ax.set_xlabel('r')
        ax.set_ylabel(f'{name}(r)')
        ax.set_title(f'{name} function, {result.n_points} points',
                     fontsize=14, fontweight='bold')

        text = f"Pointwise significance: {result.significance_level:.3f}"
        ax.text(0.02, 0.98, text, transform=ax.transAxes, verticalalignment='top',
                bbox=dict(boxstyle='round', facecolor='white', alpha=0.8))
        return fig

    def interactive_map(self, pattern: PointPattern,
                        surface: Optional[xr.DataArray] = None) -> folium.Map:
        """
        Web map with inside and illegal points as separate layers.

        A density surface, if given, becomes a heat layer. Everything is
        transformed to WGS84 for display.
        """
        if pattern.crs is None:
            raise ValueError("Interactive maps need a pattern with a CRS")

        window = gpd.GeoSeries([pattern.window], crs=pattern.crs).to_crs(WGS84)
        minx, miny, maxx, maxy = window.total_bounds
        m = folium.Map(location=[(miny + maxy) / 2, (minx + maxx) / 2],
                       tiles="CartoDB Positron")
        m.fit_bounds([[miny, minx], [maxy, maxx]])

        folium.GeoJson(window.to_json(), name='window',
                       style_function=lambda _: {'fill': False, 'color': 'black', 'weight': 2}
                       ).add_to(m)

        points = pattern.points.to_crs(WGS84)
        layers = [('inside', pattern.inside, 'blue'), ('illegal', ~pattern.inside, 'red')]
        for name, mask, colour in layers:
            group = folium.FeatureGroup(name=f"{name} ({int(mask.sum())})")
            for geom in points.geometry[mask]:
                folium.CircleMarker(location=[geom.y, geom.x], radius=3, color=colour,
                                    fill=True, fill_opacity=0.8).add_to(group)
            group.add_to(m)

        if surface is not None:
            heat = self._heat_points(surface, pattern)
            if len(heat):
                HeatMap(heat, name=f"density (sigma={surface.attrs.get('sigma')})",
                        radius=15).add_to(m)

        folium.LayerControl().add_to(m)
        return m

    def _heat_points(self, surface: xr.DataArray, pattern: PointPattern) -> list:
        """[lat, lon, weight] triples for the valid cells of a surface."""
        gx, gy = np.meshgrid(surface['x'].values, surface['y'].values)
        values = surface.values
        valid = ~np.isnan(values) & (values > 0)
        if not valid.any():
            return []

        cells = gpd.GeoSeries(gpd.points_from_xy(gx[valid], gy[valid]),
                              crs=pattern.crs).to_crs(WGS84)
        weights = values[valid] / values[valid].max()
        return [[pt.y, pt.x, float(w)] for pt, w in zip(cells, weights)]
