# geo_explore/visualization/io.py
"""Write rendered figures and maps to the output directory."""

from pathlib import Path
from typing import Union

import folium
import matplotlib.pyplot as plt
from matplotlib.figure import Figure

from geo_explore.infrastructure.logging import get_logger
from .plot_config import PlotConfig

logger = get_logger(__name__)


def save_figure(fig: Union[Figure, folium.Map], name: str, config: PlotConfig) -> Path:
    """
    Save a figure as ``<output_dir>/<name>.png`` or a map as ``<name>.html``.

    Matplotlib figures are closed after saving.

    Returns:
        Path of the written file
    """
    if config.output_dir is None:
        raise ValueError("PlotConfig.output_dir is not set")
    output_dir = Path(config.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    if isinstance(fig, folium.Map):
        path = output_dir / f"{name}.html"
        fig.save(str(path))
    else:
        path = output_dir / f"{name}.png"
        fig.savefig(path, dpi=config.dpi, bbox_inches='tight')
        plt.close(fig)

    logger.info(f"Saved {path}")
    return path
