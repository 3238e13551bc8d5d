"""Linear exploration pipelines."""

from .context import PipelineContext
from .runner import run_pipeline
from .point_pattern_pipeline import build_point_pattern_pipeline, run_point_pattern
from .time_series_pipeline import build_time_series_pipeline, run_time_series

__all__ = [
    'PipelineContext',
    'run_pipeline',
    'build_point_pattern_pipeline',
    'run_point_pattern',
    'build_time_series_pipeline',
    'run_time_series',
]
