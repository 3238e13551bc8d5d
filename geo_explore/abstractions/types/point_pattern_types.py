"""
Data types for spatial point pattern analysis.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

import geopandas as gpd
import numpy as np
import pandas as pd
from shapely.geometry.base import BaseGeometry


class SummaryFunction(Enum):
    """Distance-based summary functions supported by the envelope."""
    G = "G"  # nearest-neighbour distance distribution
    K = "K"  # Ripley's K
    L = "L"  # variance-stabilised K

    @classmethod
    def from_value(cls, value) -> 'SummaryFunction':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            valid = [f.value for f in cls]
            raise ValueError(f"Unknown summary function '{value}'. Valid: {valid}")


@dataclass(frozen=True, eq=False)
class PointPattern:
    """
    A set of observed points paired with the window they were observed in.

    All observations are kept, including those falling outside the window;
    ``inside`` flags which ones are legal members of the pattern. Statistics
    are computed from the inside points only.
    """
    points: gpd.GeoDataFrame
    window: BaseGeometry
    inside: np.ndarray
    mark_columns: List[str] = field(default_factory=list)

    def __post_init__(self):
        inside = np.asarray(self.inside, dtype=bool).copy()
        if inside.shape != (len(self.points),):
            raise ValueError(
                f"inside mask has shape {inside.shape}, expected ({len(self.points)},)")
        inside.flags.writeable = False
        object.__setattr__(self, 'inside', inside)
        object.__setattr__(self, 'mark_columns', list(self.mark_columns))

    @property
    def crs(self):
        return self.points.crs

    @property
    def n_total(self) -> int:
        return len(self.points)

    @property
    def n_inside(self) -> int:
        return int(self.inside.sum())

    @property
    def n_illegal(self) -> int:
        return self.n_total - self.n_inside

    @property
    def area(self) -> float:
        return float(self.window.area)

    @property
    def intensity(self) -> float:
        """Points per unit area (inside points only)."""
        return self.n_inside / self.area if self.area > 0 else float('nan')

    @property
    def all_coordinates(self) -> np.ndarray:
        """Coordinates of every observation, shape (n_total, 2)."""
        if self.n_total == 0:
            return np.empty((0, 2))
        return np.column_stack([self.points.geometry.x.to_numpy(),
                                self.points.geometry.y.to_numpy()])

    @property
    def coordinates(self) -> np.ndarray:
        """Coordinates of the legal (inside) points, shape (n_inside, 2)."""
        return self.all_coordinates[self.inside]

    @property
    def illegal_coordinates(self) -> np.ndarray:
        """Coordinates of points lying outside the window."""
        return self.all_coordinates[~self.inside]

    @property
    def marks(self) -> pd.DataFrame:
        """Mark attributes of the inside points."""
        return pd.DataFrame(self.points.loc[self.inside, self.mark_columns])

    def split_by_mark(self, column: str) -> Dict[Any, 'PointPattern']:
        """Split into one pattern per distinct value of a mark column.

        Every sub-pattern shares this pattern's window. Illegal points keep
        their flag in the sub-pattern they belong to.
        """
        if column not in self.points.columns:
            raise KeyError(f"Mark column '{column}' not found in observations")

        patterns = {}
        values = self.points[column]
        for value in pd.unique(values.dropna()):
            mask = (values == value).to_numpy()
            patterns[value] = PointPattern(
                points=self.points.loc[mask].reset_index(drop=True),
                window=self.window,
                inside=self.inside[mask],
                mark_columns=self.mark_columns,
            )
        return patterns

    def summary(self) -> Dict[str, Any]:
        """Counts, window area and intensity."""
        return {
            'n_total': self.n_total,
            'n_inside': self.n_inside,
            'n_illegal': self.n_illegal,
            'area': self.area,
            'intensity': self.intensity,
            'crs': self.crs.to_string() if self.crs is not None else None,
        }


@dataclass
class EnvelopeResult:
    """
    Observed summary function with its CSR value and simulation envelope.

    ``table`` is indexed by ``r`` and has columns ``obs``, ``theo``,
    ``lo`` and ``hi``.
    """
    table: pd.DataFrame
    function: SummaryFunction
    nsim: int
    nrank: int
    n_points: int
    seed: Optional[int] = None

    @property
    def r(self) -> np.ndarray:
        return self.table.index.to_numpy()

    @property
    def obs(self) -> pd.Series:
        return self.table['obs']

    @property
    def theo(self) -> pd.Series:
        return self.table['theo']

    @property
    def lo(self) -> pd.Series:
        return self.table['lo']

    @property
    def hi(self) -> pd.Series:
        return self.table['hi']

    @property
    def significance_level(self) -> float:
        """Pointwise two-sided significance of the envelope test."""
        return 2 * self.nrank / (self.nsim + 1)

    def outside_envelope(self) -> pd.Series:
        """Boolean series: observed value falls outside [lo, hi]."""
        return (self.obs < self.lo) | (self.obs > self.hi)
