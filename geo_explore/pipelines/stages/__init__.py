"""Pipeline stages."""

from .base_stage import PipelineStage, StageResult, StageStatus
from .point_pattern_stages import (
    LoadLayersStage, BuildPatternStage, DensityStage, EnvelopeStage, PointPatternPlotStage,
)
from .time_series_stages import (
    LoadTableStage, IndexStage, AggregateStage, RangeFilterStage, RollingStage,
    AutocorrelationStage, DecompositionStage, TimeSeriesPlotStage,
)

__all__ = [
    'PipelineStage',
    'StageResult',
    'StageStatus',
    'LoadLayersStage',
    'BuildPatternStage',
    'DensityStage',
    'EnvelopeStage',
    'PointPatternPlotStage',
    'LoadTableStage',
    'IndexStage',
    'AggregateStage',
    'RangeFilterStage',
    'RollingStage',
    'AutocorrelationStage',
    'DecompositionStage',
    'TimeSeriesPlotStage',
]
