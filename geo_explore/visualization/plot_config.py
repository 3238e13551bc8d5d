# geo_explore/visualization/plot_config.py
"""Rendering options shared by every plot."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple


class RenderMode(Enum):
    STATIC = "static"            # matplotlib figures
    INTERACTIVE = "interactive"  # folium web maps


@dataclass
class PlotConfig:
    """Explicit plot settings passed to each renderer."""
    mode: RenderMode = RenderMode.STATIC
    figsize: Tuple[float, float] = (10, 7)
    dpi: int = 150
    cmap: str = 'viridis'
    output_dir: Optional[Path] = None
    basemap: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.mode, RenderMode):
            self.mode = RenderMode(str(self.mode).lower())
        self.figsize = tuple(self.figsize)
        if self.output_dir is not None:
            self.output_dir = Path(self.output_dir)

    @property
    def interactive(self) -> bool:
        return self.mode is RenderMode.INTERACTIVE

    @classmethod
    def from_config(cls, config) -> 'PlotConfig':
        """Build from the ``plotting`` and ``paths`` sections of a Config."""
        plotting = config.plotting
        return cls(
            mode=plotting.get('mode', 'static'),
            figsize=plotting.get('figsize', (10, 7)),
            dpi=plotting.get('dpi', 150),
            cmap=plotting.get('cmap', 'viridis'),
            output_dir=config.paths.get('output_dir'),
            basemap=plotting.get('basemap', False),
        )
