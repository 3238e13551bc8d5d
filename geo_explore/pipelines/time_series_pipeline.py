# geo_explore/pipelines/time_series_pipeline.py
"""Time series exploration: load, index, aggregate, filter, smooth, decompose, plot."""

from pathlib import Path
from typing import Dict, List, Union

from geo_explore.config import Config
from .context import PipelineContext
from .runner import run_pipeline
from .stages import (
    AggregateStage, AutocorrelationStage, DecompositionStage, IndexStage,
    LoadTableStage, PipelineStage, RangeFilterStage, RollingStage, StageResult,
    TimeSeriesPlotStage,
)


def build_time_series_pipeline(source: Union[str, Path],
                               plot: bool = True,
                               decompose: bool = True) -> List[PipelineStage]:
    """Stages reading the delimited table at ``source``."""
    stages = [
        LoadTableStage(source),
        IndexStage(),
        AggregateStage(),
        RangeFilterStage(),
        RollingStage(),
        AutocorrelationStage(),
    ]
    if decompose:
        stages.append(DecompositionStage())
    if plot:
        stages.append(TimeSeriesPlotStage())
    return stages


def run_time_series(source: Union[str, Path],
                    config: Config,
                    plot: bool = True,
                    decompose: bool = True) -> PipelineContext:
    """Run the full time series pipeline and return its context."""
    context = PipelineContext(config=config)
    results: Dict[str, StageResult] = run_pipeline(
        build_time_series_pipeline(source, plot=plot, decompose=decompose),
        context, name='time_series')
    context.set('results', results)
    return context
