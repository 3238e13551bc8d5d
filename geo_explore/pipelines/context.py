# geo_explore/pipelines/context.py
"""Shared state passed between pipeline stages."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from geo_explore.config import Config
from geo_explore.infrastructure.logging import LoggingContext
from geo_explore.visualization import PlotConfig


@dataclass
class PipelineContext:
    """Shared context for pipeline execution."""
    config: Config
    plot_config: Optional[PlotConfig] = None
    logging_context: LoggingContext = field(default_factory=LoggingContext)
    shared_data: Dict[str, Any] = field(default_factory=dict)
    outputs: Dict[str, Path] = field(default_factory=dict)

    def __post_init__(self):
        if self.plot_config is None:
            self.plot_config = PlotConfig.from_config(self.config)

    @property
    def run_id(self) -> str:
        return self.logging_context.run_id

    def get(self, key: str, default: Any = None) -> Any:
        """Get value from shared data."""
        return self.shared_data.get(key, default)

    def set(self, key: str, value: Any):
        """Set value in shared data."""
        self.shared_data[key] = value
